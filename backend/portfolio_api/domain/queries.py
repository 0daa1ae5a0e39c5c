"""
Typed listing options.

Each query dataclass mirrors the query-string filters a listing route
accepts and renders them as a Mongo filter. `public=True` pins the status
to the resource's public value; asking a public listing for any other
status yields an empty result rather than widening it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

# An impossible status match; keeps the filter shape uniform.
_NOTHING: dict[str, Any] = {"$in": []}

BLOG_PUBLIC_SORT = [("publishedAt", -1), ("createdAt", -1)]
BLOG_ADMIN_SORT = [("createdAt", -1)]
PROJECT_SORT = [("featured", -1), ("createdAt", -1)]
PROJECT_ADMIN_SORT = [("createdAt", -1)]
SERVICE_SORT = [("featured", -1), ("sortOrder", 1), ("createdAt", -1)]
SKILL_SORT = [("featured", -1), ("sortOrder", 1), ("createdAt", -1)]
PRICING_SORT = [("isFeatured", -1), ("isPopular", -1), ("sortOrder", 1), ("createdAt", -1)]
USER_SORT = [("createdAt", -1)]


def search_pattern(term: str | None) -> re.Pattern[str] | None:
    s = (term or "").strip()
    if not s:
        return None
    return re.compile(re.escape(s), re.IGNORECASE)


def _status(requested: str | None, *, public: bool, public_value: str) -> Any:
    if not public:
        return requested
    if requested is None or requested == public_value:
        return public_value
    return _NOTHING


def _search(filt: dict[str, Any], term: str | None, fields: tuple[str, ...]) -> None:
    rx = search_pattern(term)
    if rx is not None:
        filt["$or"] = [{f: rx} for f in fields]


@dataclass(frozen=True, slots=True)
class BlogQuery:
    category: str | None = None
    tag: str | None = None
    status: str | None = None
    search: str | None = None

    def to_filter(self, *, public: bool) -> dict[str, Any]:
        filt: dict[str, Any] = {}
        status = _status(self.status, public=public, public_value="published")
        if status is not None:
            filt["status"] = status
        if self.category:
            filt["category"] = self.category
        if self.tag:
            filt["tags"] = self.tag.strip().lower()
        _search(filt, self.search, ("title", "excerpt", "content", "tags"))
        return filt


@dataclass(frozen=True, slots=True)
class ProjectQuery:
    category: str | None = None
    featured: bool | None = None
    status: str | None = None
    search: str | None = None

    def to_filter(self, *, public: bool) -> dict[str, Any]:
        filt: dict[str, Any] = {}
        status = _status(self.status, public=public, public_value="published")
        if status is not None:
            filt["status"] = status
        if self.category:
            filt["category"] = self.category
        if self.featured is not None:
            filt["featured"] = self.featured
        _search(filt, self.search, ("title", "description", "techStack"))
        return filt


@dataclass(frozen=True, slots=True)
class ServiceQuery:
    category: str | None = None
    status: str | None = None
    featured: bool | None = None
    search: str | None = None

    def to_filter(self, *, public: bool) -> dict[str, Any]:
        filt: dict[str, Any] = {}
        status = _status(self.status, public=public, public_value="active")
        if status is not None:
            filt["status"] = status
        if self.category:
            filt["category"] = self.category
        if self.featured is not None:
            filt["featured"] = self.featured
        _search(filt, self.search, ("title", "description", "shortDescription", "tags"))
        return filt


@dataclass(frozen=True, slots=True)
class SkillQuery:
    category: str | None = None
    level: str | None = None
    status: str | None = None
    featured: bool | None = None
    search: str | None = None

    def to_filter(self, *, public: bool) -> dict[str, Any]:
        filt: dict[str, Any] = {}
        status = _status(self.status, public=public, public_value="active")
        if status is not None:
            filt["status"] = status
        if self.category:
            filt["category"] = self.category
        if self.level:
            filt["level"] = self.level
        if self.featured is not None:
            filt["featured"] = self.featured
        _search(filt, self.search, ("name", "description", "category"))
        return filt


@dataclass(frozen=True, slots=True)
class PricingQuery:
    category: str | None = None
    type: str | None = None
    status: str | None = None
    featured: bool | None = None
    popular: bool | None = None
    currency: str | None = None
    period: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    search: str | None = None

    def to_filter(self, *, public: bool) -> dict[str, Any]:
        filt: dict[str, Any] = {}
        status = _status(self.status, public=public, public_value="active")
        if status is not None:
            filt["status"] = status
        if self.category:
            filt["category"] = self.category
        if self.type:
            filt["type"] = self.type
        if self.featured is not None:
            filt["isFeatured"] = self.featured
        if self.popular is not None:
            filt["isPopular"] = self.popular
        if self.currency:
            filt["price.currency"] = self.currency
        if self.period:
            filt["price.period"] = self.period

        amount: dict[str, float] = {}
        if self.min_price is not None:
            amount["$gte"] = self.min_price
        if self.max_price is not None:
            amount["$lte"] = self.max_price
        if amount:
            filt["price.amount"] = amount

        _search(
            filt,
            self.search,
            ("name", "title", "description", "shortDescription", "category", "features.name"),
        )
        return filt
