from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from bson import ObjectId


def parse_object_id(value: Any) -> ObjectId | None:
    """Return an ObjectId for a 24-hex string (or ObjectId), else None."""
    if isinstance(value, ObjectId):
        return value
    s = str(value or "").strip()
    if not ObjectId.is_valid(s) or len(s) != 24:
        return None
    return ObjectId(s)


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _to_api_value(v: Any) -> Any:
    if isinstance(v, ObjectId):
        return str(v)
    if isinstance(v, dict):
        return {str(k): _to_api_value(x) for k, x in v.items()}
    if isinstance(v, (list, tuple)):
        return [_to_api_value(x) for x in v]
    if isinstance(v, datetime) and v.tzinfo is None:
        # The driver hands back naive UTC datetimes unless tz_aware is set.
        return v.replace(tzinfo=timezone.utc)
    return v


def to_api(doc: dict[str, Any] | None) -> dict[str, Any] | None:
    """Render a stored document as JSON-safe API output (`_id` and `id` as strings)."""
    if doc is None:
        return None
    out = _to_api_value(dict(doc))
    if "_id" in out:
        out["id"] = out["_id"]
    return out


def to_api_list(docs: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [d for d in (to_api(x) for x in docs) if d is not None]
