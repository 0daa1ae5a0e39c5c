"""
Base repository interface.

All repositories implement this interface; `MongoRepository` is the shared
implementation over one collection. Every driver call goes through
`db_call` so failures surface as typed storage errors.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database

from ..db.mongo.calls import db_call
from ..db.mongo.pagination import Page, PageRequest
from ..db.mongo.serialize import now_utc, parse_object_id
from ..domain.normalize import stamp_timestamps

Sort = list[tuple[str, int]]


class Repository(ABC):
    """Base repository interface."""

    @abstractmethod
    def get(self, id: str) -> dict[str, Any] | None:
        """Get an entity by ID."""
        pass

    @abstractmethod
    def list(self, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """List entities matching filters."""
        pass

    @abstractmethod
    def create(self, entity: dict[str, Any]) -> dict[str, Any]:
        """Create a new entity."""
        pass

    @abstractmethod
    def update(self, id: str, updates: dict[str, Any]) -> dict[str, Any] | None:
        """Update an existing entity."""
        pass


class MongoRepository(Repository):
    collection_name: ClassVar[str]
    # Fields a full-document replace must carry over from the stored record.
    immutable_fields: ClassVar[tuple[str, ...]] = ()
    default_sort: ClassVar[Sort] = [("createdAt", -1)]

    def __init__(self, db: Database):
        self._db = db

    @property
    def collection(self) -> Collection:
        return self._db[self.collection_name]

    def _key(self, oid: Any) -> dict[str, Any]:
        return {"_id": str(oid)}

    def get(self, id: str, *, projection: dict[str, Any] | None = None) -> dict[str, Any] | None:
        oid = parse_object_id(id)
        if oid is None:
            return None
        return db_call(
            "find_one",
            lambda: self.collection.find_one({"_id": oid}, projection),
            collection=self.collection_name,
            key=self._key(oid),
        )

    def find_one(
        self, filt: dict[str, Any], *, projection: dict[str, Any] | None = None
    ) -> dict[str, Any] | None:
        return db_call(
            "find_one",
            lambda: self.collection.find_one(filt, projection),
            collection=self.collection_name,
        )

    def get_by_slug_or_id(
        self, value: str, *, where: dict[str, Any] | None = None
    ) -> dict[str, Any] | None:
        """Match on `slug` first, then on `_id`; `where` narrows both lookups."""
        base = dict(where or {})
        doc = self.find_one({**base, "slug": str(value or "").strip().lower()})
        if doc is None:
            oid = parse_object_id(value)
            if oid is not None:
                doc = self.find_one({**base, "_id": oid})
        return doc

    def list(
        self,
        filters: dict[str, Any] | None = None,
        *,
        sort: Sort | None = None,
        projection: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        return db_call(
            "find",
            lambda: list(
                self.collection.find(filters or {}, projection).sort(sort or self.default_sort)
            ),
            collection=self.collection_name,
        )

    def page(
        self,
        filt: dict[str, Any],
        *,
        request: PageRequest,
        sort: Sort | None = None,
        projection: dict[str, Any] | None = None,
    ) -> Page:
        total = db_call(
            "count_documents",
            lambda: self.collection.count_documents(filt),
            collection=self.collection_name,
        )
        items = db_call(
            "find",
            lambda: list(
                self.collection.find(filt, projection)
                .sort(sort or self.default_sort)
                .skip(request.skip)
                .limit(request.limit)
            ),
            collection=self.collection_name,
        )
        return Page(items=items, total=int(total), request=request)

    def create(self, entity: dict[str, Any]) -> dict[str, Any]:
        doc = stamp_timestamps(entity)
        doc.pop("_id", None)
        res = db_call(
            "insert_one",
            lambda: self.collection.insert_one(doc),
            collection=self.collection_name,
        )
        doc["_id"] = res.inserted_id
        return doc

    def replace(self, existing: dict[str, Any], doc: dict[str, Any]) -> dict[str, Any] | None:
        """
        Make `doc` the new body of `existing`; None if it vanished meanwhile.

        Written as `$set` plus `$unset` of dropped keys. `_id`, `createdAt`
        and `immutable_fields` are never written; counters moved by atomic
        `$inc` keep their current value.
        """
        oid = existing["_id"]
        kept = {"_id", "createdAt", *self.immutable_fields}
        body = {
            k: v for k, v in stamp_timestamps(doc, existing=existing).items() if k not in kept
        }
        update: dict[str, Any] = {"$set": body}
        dropped = {k: "" for k in existing if k not in body and k not in kept}
        if dropped:
            update["$unset"] = dropped
        return db_call(
            "find_one_and_update",
            lambda: self.collection.find_one_and_update(
                {"_id": oid}, update, return_document=ReturnDocument.AFTER
            ),
            collection=self.collection_name,
            key=self._key(oid),
        )

    def update(self, id: str, updates: dict[str, Any]) -> dict[str, Any] | None:
        oid = parse_object_id(id)
        if oid is None:
            return None
        return db_call(
            "find_one_and_update",
            lambda: self.collection.find_one_and_update(
                {"_id": oid},
                {"$set": {**updates, "updatedAt": now_utc()}},
                return_document=ReturnDocument.AFTER,
            ),
            collection=self.collection_name,
            key=self._key(oid),
        )

    def delete(self, id: str) -> bool:
        oid = parse_object_id(id)
        if oid is None:
            return False
        res = db_call(
            "delete_one",
            lambda: self.collection.delete_one({"_id": oid}),
            collection=self.collection_name,
            key=self._key(oid),
        )
        return res.deleted_count == 1
