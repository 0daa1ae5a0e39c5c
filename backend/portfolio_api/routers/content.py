from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from ..auth.dependencies import get_current_user
from ..context import AppContext, get_context
from ..db.mongo.serialize import to_api, to_api_list
from ..schemas.content import PageContentIn, PageKey
from ._shared import not_found

router = APIRouter(tags=["content"])


@router.get("")
def list_pages(
    _user: dict[str, Any] = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    return to_api_list(ctx.content.with_editors(ctx.content.list()))


@router.get("/{page}")
def get_page(page: PageKey, ctx: AppContext = Depends(get_context)):
    content = ctx.content.get_page(page, published_only=True)
    if content is None:
        raise not_found("Page")
    return to_api(content)


@router.put("/{page}")
def upsert_page(
    page: PageKey,
    body: dict,
    user: dict[str, Any] = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    fields = PageContentIn.model_validate(body).model_dump(
        include={"data", "seo", "isPublished"}, exclude_unset=True
    )
    return to_api(ctx.content.upsert_page(page, fields, editor_id=user["_id"]))
