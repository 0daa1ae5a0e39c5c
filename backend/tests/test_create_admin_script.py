from __future__ import annotations

import pydantic
import pytest

from conftest import make_user
from portfolio_api.auth.passwords import verify_password
from scripts.create_admin import create_admin


def test_creates_admin(db):
    result = create_admin(db, username="root", email="Root@X.com", password="secret123")
    assert result["created"] is True

    stored = db.users.find_one({"username": "root"})
    assert stored["email"] == "root@x.com"
    assert stored["role"] == "admin"
    assert stored["isActive"] is True
    assert verify_password("secret123", stored["password"])


def test_promotes_existing_user(ctx, db):
    user = make_user(ctx, username="ed", active=False)
    result = create_admin(db, username="ed", email="other@x.com", password="ignored1")
    assert result["created"] is False

    stored = db.users.find_one({"_id": user["_id"]})
    assert stored["role"] == "admin"
    assert stored["isActive"] is True
    assert verify_password("secret123", stored["password"])
    assert db.users.count_documents({}) == 1


def test_rejects_weak_password(db):
    with pytest.raises(pydantic.ValidationError):
        create_admin(db, username="root", email="root@x.com", password="123")
