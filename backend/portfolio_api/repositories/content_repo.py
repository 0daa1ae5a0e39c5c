from __future__ import annotations

from typing import Any

from bson import ObjectId
from pymongo import ReturnDocument

from ..db.mongo.calls import db_call
from ..db.mongo.expand import expand_reference, expand_references
from ..db.mongo.serialize import now_utc
from .base_repository import MongoRepository

EDITOR_FIELDS = ("username",)


class ContentRepository(MongoRepository):
    collection_name = "contents"
    default_sort = [("updatedAt", -1)]

    def get_page(self, page: str, *, published_only: bool = False) -> dict[str, Any] | None:
        filt: dict[str, Any] = {"page": page}
        if published_only:
            filt["isPublished"] = True
        return self.with_editor(self.find_one(filt))

    def upsert_page(self, page: str, fields: dict[str, Any], *, editor_id: ObjectId) -> dict[str, Any]:
        """Create or update the record for `page`, always stamping the editor."""
        now = now_utc()
        on_insert: dict[str, Any] = {"createdAt": now}
        if "isPublished" not in fields:
            on_insert["isPublished"] = False
        doc = db_call(
            "find_one_and_update",
            lambda: self.collection.find_one_and_update(
                {"page": page},
                {
                    "$set": {**fields, "lastEditedBy": editor_id, "updatedAt": now},
                    "$setOnInsert": on_insert,
                },
                upsert=True,
                return_document=ReturnDocument.AFTER,
            ),
            collection=self.collection_name,
            key={"page": page},
        )
        return self.with_editor(doc)

    def with_editor(self, doc: dict[str, Any] | None) -> dict[str, Any] | None:
        return expand_reference(
            self._db, doc, field="lastEditedBy", collection="users", fields=EDITOR_FIELDS
        )

    def with_editors(self, docs: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return expand_references(
            self._db, docs, field="lastEditedBy", collection="users", fields=EDITOR_FIELDS
        )
