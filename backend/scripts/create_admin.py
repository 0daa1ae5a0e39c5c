#!/usr/bin/env python3
"""
Create (or promote) an admin account directly in the database.

Useful when REGISTRATION_ENABLED=false and the site has no admin yet.

Usage:
    python scripts/create_admin.py --username alice --email alice@x.com [--password ...]

The password is prompted for when not given. Reads MONGO_URI / MONGO_DB_NAME
from the environment.
"""

from __future__ import annotations

import argparse
import getpass
import sys
from pathlib import Path
from typing import Any

# Add backend/ to path so `portfolio_api` imports without installation.
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from pymongo.database import Database

from portfolio_api.auth.passwords import hash_password
from portfolio_api.db.mongo.client import mongo_client, mongo_database
from portfolio_api.db.mongo.indexes import ensure_indexes
from portfolio_api.observability.logging import configure_logging, get_logger
from portfolio_api.repositories.users_repo import UsersRepository
from portfolio_api.schemas.users import RegisterRequest
from portfolio_api.settings import get_settings

log = get_logger("create_admin")


def create_admin(db: Database, *, username: str, email: str, password: str) -> dict[str, Any]:
    """
    Insert an active admin, or promote and reactivate the account that
    already owns `username`/`email`. The password is only set on insert.
    """
    req = RegisterRequest(username=username, email=email, password=password)
    users = UsersRepository(db)

    existing = users.find_one({"$or": [{"username": req.username}, {"email": req.email}]})
    if existing is not None:
        updated = users.update(str(existing["_id"]), {"role": "admin", "isActive": True})
        log.info("admin_promoted", user_id=str(existing["_id"]))
        return {"created": False, "user": updated}

    user = users.create(
        {
            "username": req.username,
            "email": req.email,
            "password": hash_password(req.password),
            "role": "admin",
            "isActive": True,
        }
    )
    log.info("admin_created", user_id=str(user["_id"]))
    return {"created": True, "user": user}


def main() -> int:
    parser = argparse.ArgumentParser(description="Create or promote an admin account")
    parser.add_argument("--username", required=True)
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", help="Prompted for when omitted")
    args = parser.parse_args()

    configure_logging(level="INFO")
    settings = get_settings()
    if not settings.mongo_uri:
        print("MONGO_URI is not set", file=sys.stderr)
        return 2

    password = args.password or getpass.getpass("Password: ")

    client = mongo_client(settings.mongo_uri)
    try:
        db = mongo_database(client, settings.mongo_db_name)
        ensure_indexes(db)
        result = create_admin(db, username=args.username, email=args.email, password=password)
    finally:
        client.close()

    verb = "Created" if result["created"] else "Promoted"
    print(f"{verb} admin {args.username}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
