from __future__ import annotations

from typing import Any

from bson import ObjectId
from pymongo.database import Database

from .calls import db_call


def _ref_ids(docs: list[dict[str, Any]], field: str) -> list[ObjectId]:
    ids: list[ObjectId] = []
    for d in docs:
        v = d.get(field)
        values = v if isinstance(v, list) else [v]
        for x in values:
            if isinstance(x, ObjectId) and x not in ids:
                ids.append(x)
    return ids


def expand_references(
    db: Database,
    docs: list[dict[str, Any]],
    *,
    field: str,
    collection: str,
    fields: tuple[str, ...],
) -> list[dict[str, Any]]:
    """
    Replace ObjectId references in `field` with the referenced documents,
    projected to `fields` (plus `_id`). Works for single references and
    lists of references; dangling references expand to None (single) or are
    dropped (lists).
    """
    ids = _ref_ids(docs, field)
    if not ids:
        return docs

    projection = {f: 1 for f in fields}
    found = db_call(
        "find",
        lambda: list(db[collection].find({"_id": {"$in": ids}}, projection)),
        collection=collection,
    )
    by_id = {d["_id"]: d for d in found}

    out: list[dict[str, Any]] = []
    for d in docs:
        v = d.get(field)
        d = dict(d)
        if isinstance(v, list):
            d[field] = [by_id[x] for x in v if x in by_id]
        elif isinstance(v, ObjectId):
            d[field] = by_id.get(v)
        out.append(d)
    return out


def expand_reference(
    db: Database,
    doc: dict[str, Any] | None,
    *,
    field: str,
    collection: str,
    fields: tuple[str, ...],
) -> dict[str, Any] | None:
    if doc is None:
        return None
    return expand_references(db, [doc], field=field, collection=collection, fields=fields)[0]
