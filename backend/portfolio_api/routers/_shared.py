from __future__ import annotations

from typing import Any, TypeVar

from fastapi import HTTPException, Query

from ..db.mongo.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, Page, PageRequest
from ..db.mongo.serialize import to_api, to_api_list
from ..schemas.common import Document

M = TypeVar("M", bound=Document)


def page_request(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
) -> PageRequest:
    return PageRequest(page=page, limit=limit)


def paginated(items: list[dict[str, Any]], page: Page) -> dict[str, Any]:
    return {"items": to_api_list(items), "pagination": page.meta()}


def not_found(what: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"{what} not found")


def deleted(what: str) -> dict[str, str]:
    return {"message": f"{what} deleted successfully"}


def merge_patch(model: type[M], existing: dict[str, Any], body: dict[str, Any]) -> M:
    """
    Shallow-merge `body` over the stored record and re-validate the result
    as a whole, so a partial update obeys every field constraint.
    """
    merged = {**(to_api(existing) or {}), **(body or {})}
    return model.model_validate(merged)
