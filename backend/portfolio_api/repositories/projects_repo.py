from __future__ import annotations

from typing import Any

from ..db.mongo.expand import expand_reference, expand_references
from ..domain.queries import PROJECT_ADMIN_SORT
from .base_repository import MongoRepository

CREATOR_FIELDS = ("username", "profile")


class ProjectsRepository(MongoRepository):
    collection_name = "projects"
    immutable_fields = ("createdBy",)
    default_sort = PROJECT_ADMIN_SORT

    def with_creator(self, doc: dict[str, Any] | None) -> dict[str, Any] | None:
        return expand_reference(
            self._db, doc, field="createdBy", collection="users", fields=CREATOR_FIELDS
        )

    def with_creators(self, docs: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return expand_references(
            self._db, docs, field="createdBy", collection="users", fields=CREATOR_FIELDS
        )
