from __future__ import annotations

from typing import Any, Literal

from pymongo import ReturnDocument

from ..db.mongo.calls import db_call
from ..db.mongo.expand import expand_reference, expand_references
from ..db.mongo.serialize import parse_object_id
from ..domain.queries import PRICING_SORT
from .base_repository import MongoRepository

Counter = Literal["views", "clicks", "conversions"]

EMPTY_ANALYTICS = {"views": 0, "clicks": 0, "conversions": 0}

EMPTY_OVERVIEW = {
    "totalPlans": 0,
    "totalViews": 0,
    "totalClicks": 0,
    "totalConversions": 0,
    "averagePrice": 0,
    "minPrice": 0,
    "maxPrice": 0,
}


class PricingRepository(MongoRepository):
    collection_name = "pricing"
    immutable_fields = ("analytics",)
    default_sort = PRICING_SORT

    def create(self, entity: dict[str, Any]) -> dict[str, Any]:
        return super().create({**entity, "analytics": dict(EMPTY_ANALYTICS)})

    def _inc(self, filt: dict[str, Any], counter: Counter) -> dict[str, Any] | None:
        return db_call(
            "find_one_and_update",
            lambda: self.collection.find_one_and_update(
                {**filt, "status": "active"},
                {"$inc": {f"analytics.{counter}": 1}},
                return_document=ReturnDocument.AFTER,
            ),
            collection=self.collection_name,
            key=filt,
        )

    def increment(self, slug: str, counter: Counter) -> dict[str, Any] | None:
        """Atomically add one to `analytics.<counter>` of an active plan."""
        return self._inc({"slug": str(slug or "").strip().lower()}, counter)

    def record_view(self, slug_or_id: str) -> dict[str, Any] | None:
        """Count a public view; matches on slug first, then on id."""
        doc = self.increment(slug_or_id, "views")
        if doc is None:
            oid = parse_object_id(slug_or_id)
            if oid is not None:
                doc = self._inc({"_id": oid}, "views")
        return doc

    def with_services(
        self, doc: dict[str, Any] | None, *, detailed: bool = False
    ) -> dict[str, Any] | None:
        fields = ("title", "slug", "description") if detailed else ("title", "slug")
        return expand_reference(
            self._db, doc, field="services", collection="services", fields=fields
        )

    def with_services_many(self, docs: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return expand_references(
            self._db, docs, field="services", collection="services", fields=("title", "slug")
        )

    def stats(self) -> dict[str, Any]:
        """Totals and price spread over active plans, overall and per plan type."""
        match = {"$match": {"status": "active"}}
        overview = db_call(
            "aggregate",
            lambda: list(
                self.collection.aggregate(
                    [
                        match,
                        {
                            "$group": {
                                "_id": None,
                                "totalPlans": {"$sum": 1},
                                "totalViews": {"$sum": "$analytics.views"},
                                "totalClicks": {"$sum": "$analytics.clicks"},
                                "totalConversions": {"$sum": "$analytics.conversions"},
                                "averagePrice": {"$avg": "$price.amount"},
                                "minPrice": {"$min": "$price.amount"},
                                "maxPrice": {"$max": "$price.amount"},
                            }
                        },
                    ]
                )
            ),
            collection=self.collection_name,
        )
        by_type = db_call(
            "aggregate",
            lambda: list(
                self.collection.aggregate(
                    [
                        match,
                        {
                            "$group": {
                                "_id": "$type",
                                "count": {"$sum": 1},
                                "averagePrice": {"$avg": "$price.amount"},
                                "totalViews": {"$sum": "$analytics.views"},
                                "totalClicks": {"$sum": "$analytics.clicks"},
                                "totalConversions": {"$sum": "$analytics.conversions"},
                            }
                        },
                        {"$sort": {"_id": 1}},
                    ]
                )
            ),
            collection=self.collection_name,
        )

        head = dict(overview[0]) if overview else dict(EMPTY_OVERVIEW)
        head.pop("_id", None)
        types = []
        for row in by_type:
            row = dict(row)
            types.append({"type": row.pop("_id"), **row})
        return {"overview": head, "byType": types}
