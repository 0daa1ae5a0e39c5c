from __future__ import annotations

from typing import Any

from ..db.mongo.expand import expand_reference, expand_references
from ..domain.queries import BLOG_ADMIN_SORT
from .base_repository import MongoRepository

AUTHOR_FIELDS = ("username", "profile")


class BlogRepository(MongoRepository):
    collection_name = "blogs"
    immutable_fields = ("author",)
    default_sort = BLOG_ADMIN_SORT

    def get_published(self, slug_or_id: str) -> dict[str, Any] | None:
        return self.with_author(self.get_by_slug_or_id(slug_or_id, where={"status": "published"}))

    def with_author(self, doc: dict[str, Any] | None) -> dict[str, Any] | None:
        return expand_reference(
            self._db, doc, field="author", collection="users", fields=AUTHOR_FIELDS
        )

    def with_authors(self, docs: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return expand_references(
            self._db, docs, field="author", collection="users", fields=AUTHOR_FIELDS
        )
