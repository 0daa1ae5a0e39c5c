from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from ..auth.dependencies import get_current_user
from ..context import AppContext, get_context
from ..db.mongo.pagination import PageRequest
from ..db.mongo.serialize import to_api
from ..domain.normalize import normalize_service
from ..domain.queries import SERVICE_SORT, ServiceQuery
from ..schemas.services import ServiceIn, ServiceStatus
from ._shared import deleted, merge_patch, not_found, page_request, paginated

router = APIRouter(tags=["services"])


@router.get("")
def list_services(
    category: str | None = Query(None, max_length=100),
    status: ServiceStatus | None = None,
    featured: bool | None = None,
    search: str | None = Query(None, max_length=100),
    pr: PageRequest = Depends(page_request),
    ctx: AppContext = Depends(get_context),
):
    q = ServiceQuery(category=category, status=status, featured=featured, search=search)
    page = ctx.services.page(q.to_filter(public=True), request=pr, sort=SERVICE_SORT)
    return paginated(page.items, page)


@router.get("/admin/all")
def list_all_services(
    category: str | None = Query(None, max_length=100),
    status: ServiceStatus | None = None,
    featured: bool | None = None,
    search: str | None = Query(None, max_length=100),
    pr: PageRequest = Depends(page_request),
    _user: dict[str, Any] = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    q = ServiceQuery(category=category, status=status, featured=featured, search=search)
    page = ctx.services.page(q.to_filter(public=False), request=pr, sort=SERVICE_SORT)
    return paginated(page.items, page)


@router.get("/{slug}")
def get_service(slug: str, ctx: AppContext = Depends(get_context)):
    service = ctx.services.get_by_slug_or_id(slug, where={"status": "active"})
    if service is None:
        raise not_found("Service")
    return to_api(service)


@router.post("", status_code=201)
def create_service(
    body: dict,
    _user: dict[str, Any] = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    doc = normalize_service(ServiceIn.model_validate(body).to_document())
    created = ctx.services.create(doc)
    return to_api(ctx.services.get(str(created["_id"])))


@router.put("/{id}")
def update_service(
    id: str,
    body: dict,
    _user: dict[str, Any] = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    existing = ctx.services.get(id)
    if existing is None:
        raise not_found("Service")

    service = merge_patch(ServiceIn, existing, body)
    updated = ctx.services.replace(existing, normalize_service(service.to_document()))
    if updated is None:
        raise not_found("Service")
    return to_api(updated)


@router.delete("/{id}")
def delete_service(
    id: str,
    _user: dict[str, Any] = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    if not ctx.services.delete(id):
        raise not_found("Service")
    return deleted("Service")
