from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from ..auth.dependencies import get_current_user
from ..context import AppContext, get_context
from ..db.mongo.pagination import PageRequest
from ..db.mongo.serialize import to_api, to_api_list
from ..domain.normalize import normalize_pricing_plan
from ..domain.queries import PRICING_SORT, PricingQuery
from ..schemas.common import Currency
from ..schemas.pricing import PlanPeriod, PlanStatus, PlanType, PricingPlanIn, with_derived_fields
from ._shared import deleted, merge_patch, not_found, page_request

router = APIRouter(tags=["pricing"])


def _plan(doc: dict[str, Any] | None) -> dict[str, Any]:
    return with_derived_fields(to_api(doc) or {})


def _plans_page(ctx: AppContext, q: PricingQuery, *, public: bool, pr: PageRequest) -> dict[str, Any]:
    page = ctx.pricing.page(q.to_filter(public=public), request=pr, sort=PRICING_SORT)
    items = ctx.pricing.with_services_many(page.items)
    return {
        "items": [with_derived_fields(p) for p in to_api_list(items)],
        "pagination": page.meta(),
    }


def _query(
    category: str | None = Query(None, max_length=100),
    type: PlanType | None = None,
    status: PlanStatus | None = None,
    featured: bool | None = None,
    popular: bool | None = None,
    currency: Currency | None = None,
    period: PlanPeriod | None = None,
    minPrice: float | None = Query(None, ge=0),
    maxPrice: float | None = Query(None, ge=0),
    search: str | None = Query(None, max_length=100),
) -> PricingQuery:
    if minPrice is not None and maxPrice is not None and minPrice > maxPrice:
        raise HTTPException(status_code=400, detail="minPrice cannot exceed maxPrice")
    return PricingQuery(
        category=category,
        type=type,
        status=status,
        featured=featured,
        popular=popular,
        currency=currency,
        period=period,
        min_price=minPrice,
        max_price=maxPrice,
        search=search,
    )


@router.get("")
def list_plans(
    q: PricingQuery = Depends(_query),
    pr: PageRequest = Depends(page_request),
    ctx: AppContext = Depends(get_context),
):
    return _plans_page(ctx, q, public=True, pr=pr)


@router.get("/admin/all")
def list_all_plans(
    q: PricingQuery = Depends(_query),
    pr: PageRequest = Depends(page_request),
    _user: dict[str, Any] = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    return _plans_page(ctx, q, public=False, pr=pr)


@router.get("/analytics/stats")
def plan_stats(ctx: AppContext = Depends(get_context)):
    return ctx.pricing.stats()


@router.get("/{slug}")
def get_plan(slug: str, ctx: AppContext = Depends(get_context)):
    plan = ctx.pricing.record_view(slug)
    if plan is None:
        raise not_found("Pricing plan")
    return _plan(ctx.pricing.with_services(plan, detailed=True))


@router.post("/{slug}/click")
def track_click(slug: str, ctx: AppContext = Depends(get_context)):
    if ctx.pricing.increment(slug, "clicks") is None:
        raise not_found("Pricing plan")
    return {"message": "Click tracked successfully"}


@router.post("/{slug}/conversion")
def track_conversion(slug: str, ctx: AppContext = Depends(get_context)):
    if ctx.pricing.increment(slug, "conversions") is None:
        raise not_found("Pricing plan")
    return {"message": "Conversion tracked successfully"}


@router.post("", status_code=201)
def create_plan(
    body: dict,
    _user: dict[str, Any] = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    doc = normalize_pricing_plan(PricingPlanIn.model_validate(body).to_document())
    created = ctx.pricing.create(doc)
    return _plan(ctx.pricing.with_services(ctx.pricing.get(str(created["_id"]))))


@router.put("/{id}")
def update_plan(
    id: str,
    body: dict,
    _user: dict[str, Any] = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    existing = ctx.pricing.get(id)
    if existing is None:
        raise not_found("Pricing plan")

    plan = merge_patch(PricingPlanIn, existing, body)
    updated = ctx.pricing.replace(existing, normalize_pricing_plan(plan.to_document()))
    if updated is None:
        raise not_found("Pricing plan")
    return _plan(ctx.pricing.with_services(updated))


@router.delete("/{id}")
def delete_plan(
    id: str,
    _user: dict[str, Any] = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    if not ctx.pricing.delete(id):
        raise not_found("Pricing plan")
    return deleted("Pricing plan")
