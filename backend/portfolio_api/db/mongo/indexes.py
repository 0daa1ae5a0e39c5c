"""MongoDB index management."""

from __future__ import annotations

from pymongo import ASCENDING, DESCENDING
from pymongo.database import Database

from .calls import db_call


def ensure_indexes(db: Database) -> None:
    """
    Create required indexes on MongoDB collections.

    Call this during application startup; unique indexes back the slug,
    username/email and page-key uniqueness rules.
    """
    def _create(collection: str, keys, **kwargs) -> None:
        db_call(
            "create_index",
            lambda: db[collection].create_index(keys, **kwargs),
            collection=collection,
        )

    # Users
    _create("users", "username", unique=True)
    _create("users", "email", unique=True)

    # Blog posts
    _create("blogs", "slug", unique=True)
    _create("blogs", [("status", ASCENDING), ("publishedAt", DESCENDING)])
    _create("blogs", "tags")

    # Projects
    _create("projects", [("status", ASCENDING), ("featured", DESCENDING), ("createdAt", DESCENDING)])

    # Services
    _create("services", "slug", unique=True)
    _create("services", [("status", ASCENDING), ("featured", DESCENDING), ("sortOrder", ASCENDING)])
    _create("services", [("category", ASCENDING), ("status", ASCENDING)])
    _create("services", "tags")

    # Skills
    _create("skills", "slug", unique=True)
    _create("skills", [("status", ASCENDING), ("featured", DESCENDING), ("sortOrder", ASCENDING)])
    _create("skills", [("level", ASCENDING), ("status", ASCENDING)])

    # Pricing plans
    _create("pricing", "slug", unique=True)
    _create(
        "pricing",
        [
            ("status", ASCENDING),
            ("isFeatured", DESCENDING),
            ("isPopular", DESCENDING),
            ("sortOrder", ASCENDING),
        ],
    )
    _create("pricing", [("type", ASCENDING), ("status", ASCENDING)])
    _create("pricing", [("price.amount", ASCENDING), ("status", ASCENDING)])

    # Page content
    _create("contents", "page", unique=True)
