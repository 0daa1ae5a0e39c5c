"""
Pre-write normalization for stored documents.

Routers validate a body against its schema, merge it over the stored record
on update, and call the matching `normalize_*` function right before the
write. Each function returns a new dict; inputs are never mutated.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from ..db.mongo.serialize import now_utc, parse_object_id
from .slugs import slugify

SEO_TITLE_MAX = 60
SEO_DESCRIPTION_MAX = 160


def _clip(value: str | None, limit: int) -> str | None:
    if not value:
        return None
    return value[:limit].rstrip()


def stamp_timestamps(
    doc: dict[str, Any],
    *,
    existing: dict[str, Any] | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    ts = now or now_utc()
    out = dict(doc)
    out["createdAt"] = (existing or {}).get("createdAt") or ts
    out["updatedAt"] = ts
    return out


def normalize_blog_post(doc: dict[str, Any], *, now: datetime | None = None) -> dict[str, Any]:
    out = dict(doc)
    out["slug"] = slugify(out["title"])
    if out.get("status") == "published" and not out.get("publishedAt"):
        out["publishedAt"] = now or now_utc()
    return out


def normalize_service(doc: dict[str, Any]) -> dict[str, Any]:
    out = dict(doc)
    out["slug"] = slugify(out["title"])
    if not out.get("seoTitle"):
        out["seoTitle"] = _clip(out["title"], SEO_TITLE_MAX)
    if not out.get("seoDescription") and out.get("shortDescription"):
        out["seoDescription"] = _clip(out["shortDescription"], SEO_DESCRIPTION_MAX)
    return {k: v for k, v in out.items() if v is not None}


def normalize_skill(doc: dict[str, Any]) -> dict[str, Any]:
    out = dict(doc)
    out["slug"] = slugify(out["name"])
    return out


def normalize_pricing_plan(doc: dict[str, Any]) -> dict[str, Any]:
    out = dict(doc)
    out["slug"] = slugify(out["name"])
    if not out.get("seoTitle"):
        out["seoTitle"] = _clip(f"{out['title']} - {out['name']}", SEO_TITLE_MAX)
    if not out.get("seoDescription") and out.get("shortDescription"):
        out["seoDescription"] = _clip(out["shortDescription"], SEO_DESCRIPTION_MAX)
    out["services"] = [oid for oid in (parse_object_id(s) for s in out.get("services") or []) if oid]
    return out
