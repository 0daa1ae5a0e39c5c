from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import mongomock
import pytest
from fastapi.testclient import TestClient

# Ensure `backend/` is on sys.path so `import portfolio_api.*` works in tests.
BACKEND_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BACKEND_DIR))

from portfolio_api.auth.passwords import hash_password  # noqa: E402
from portfolio_api.auth.tokens import issue_token  # noqa: E402
from portfolio_api.context import AppContext  # noqa: E402
from portfolio_api.db.mongo.indexes import ensure_indexes  # noqa: E402
from portfolio_api.errors import ImageHostError  # noqa: E402
from portfolio_api.infrastructure.images import UploadedImage  # noqa: E402
from portfolio_api.main import create_app  # noqa: E402
from portfolio_api.repositories.users_repo import UsersRepository  # noqa: E402
from portfolio_api.settings import Settings  # noqa: E402


class FakeImageHost:
    def __init__(self):
        self.uploads: list[dict[str, Any]] = []
        self.destroyed: list[str] = []
        self.destroy_result: str = "ok"
        self.fail_upload_named: str | None = None
        self.destroy_error: Exception | None = None
        self.closed = False

    async def upload(self, data: bytes, *, filename: str, content_type: str) -> UploadedImage:
        if self.fail_upload_named and filename == self.fail_upload_named:
            raise ImageHostError("Invalid image file", operation="upload", status_code=400)
        n = len(self.uploads) + 1
        self.uploads.append({"filename": filename, "content_type": content_type, "size": len(data)})
        return UploadedImage(
            url=f"https://res.cloudinary.com/demo/image/upload/portfolio/img{n}.jpg",
            public_id=f"portfolio/img{n}",
            width=1200,
            height=800,
        )

    async def destroy(self, public_id: str) -> str:
        if self.destroy_error is not None:
            raise self.destroy_error
        self.destroyed.append(public_id)
        return self.destroy_result

    async def aclose(self) -> None:
        self.closed = True


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "ENVIRONMENT": "test",
        "MONGO_URI": "mongodb://localhost:27017",
        "JWT_SECRET": "test-secret",
        "CLOUDINARY_CLOUD_NAME": "demo",
        "CLOUDINARY_API_KEY": "key",
        "CLOUDINARY_API_SECRET": "shh",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def db():
    database = mongomock.MongoClient()["portfolio_test"]
    ensure_indexes(database)
    return database


@pytest.fixture
def images() -> FakeImageHost:
    return FakeImageHost()


@pytest.fixture
def ctx(settings, db, images) -> AppContext:
    return AppContext(settings=settings, db=db, images=images)


@pytest.fixture
def client(ctx) -> TestClient:
    return TestClient(create_app(context=ctx))


def register(client: TestClient, username: str = "alice", email: str = "alice@x.com", password: str = "secret123"):
    return client.post(
        "/api/auth/register",
        json={"username": username, "email": email, "password": password},
    )


def make_user(ctx: AppContext, *, username: str, role: str = "editor", active: bool = True) -> dict[str, Any]:
    return UsersRepository(ctx.db).create(
        {
            "username": username,
            "email": f"{username}@x.com",
            "password": hash_password("secret123"),
            "role": role,
            "isActive": active,
        }
    )


def bearer(ctx: AppContext, user: dict[str, Any]) -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_token(str(user['_id']), settings=ctx.settings)}"}


@pytest.fixture
def admin(ctx) -> dict[str, Any]:
    return make_user(ctx, username="admin", role="admin")


@pytest.fixture
def auth(ctx, admin) -> dict[str, str]:
    return bearer(ctx, admin)
