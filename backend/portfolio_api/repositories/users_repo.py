from __future__ import annotations

from typing import Any

from bson import ObjectId

from .base_repository import MongoRepository

# Projection for reads that must not expose the password hash.
WITHOUT_PASSWORD = {"password": 0}


class UsersRepository(MongoRepository):
    collection_name = "users"
    immutable_fields = ("password",)

    def find_active_by_login(self, identifier: str) -> dict[str, Any] | None:
        """Active user whose username or (lowercased) email equals `identifier`."""
        s = str(identifier or "").strip()
        if not s:
            return None
        return self.find_one(
            {"$or": [{"username": s}, {"email": s.lower()}], "isActive": True}
        )

    def exists(self, *, username: str, email: str, exclude_id: ObjectId | None = None) -> bool:
        filt: dict[str, Any] = {"$or": [{"username": username}, {"email": email}]}
        if exclude_id is not None:
            filt["_id"] = {"$ne": exclude_id}
        return self.find_one(filt, projection={"_id": 1}) is not None
