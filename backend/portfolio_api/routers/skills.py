from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from ..auth.dependencies import get_current_user
from ..context import AppContext, get_context
from ..db.mongo.pagination import PageRequest
from ..db.mongo.serialize import to_api
from ..domain.normalize import normalize_skill
from ..domain.queries import SKILL_SORT, SkillQuery
from ..schemas.skills import SkillIn, SkillLevel, SkillStatus
from ._shared import deleted, merge_patch, not_found, page_request, paginated

router = APIRouter(tags=["skills"])


@router.get("")
def list_skills(
    category: str | None = Query(None, max_length=100),
    level: SkillLevel | None = None,
    status: SkillStatus | None = None,
    featured: bool | None = None,
    search: str | None = Query(None, max_length=100),
    pr: PageRequest = Depends(page_request),
    ctx: AppContext = Depends(get_context),
):
    q = SkillQuery(category=category, level=level, status=status, featured=featured, search=search)
    page = ctx.skills.page(q.to_filter(public=True), request=pr, sort=SKILL_SORT)
    return paginated(page.items, page)


@router.get("/admin/all")
def list_all_skills(
    category: str | None = Query(None, max_length=100),
    level: SkillLevel | None = None,
    status: SkillStatus | None = None,
    featured: bool | None = None,
    search: str | None = Query(None, max_length=100),
    pr: PageRequest = Depends(page_request),
    _user: dict[str, Any] = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    q = SkillQuery(category=category, level=level, status=status, featured=featured, search=search)
    page = ctx.skills.page(q.to_filter(public=False), request=pr, sort=SKILL_SORT)
    return paginated(page.items, page)


@router.get("/{slug}")
def get_skill(slug: str, ctx: AppContext = Depends(get_context)):
    skill = ctx.skills.get_by_slug_or_id(slug, where={"status": "active"})
    if skill is None:
        raise not_found("Skill")
    return to_api(skill)


@router.post("", status_code=201)
def create_skill(
    body: dict,
    _user: dict[str, Any] = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    doc = normalize_skill(SkillIn.model_validate(body).to_document())
    created = ctx.skills.create(doc)
    return to_api(ctx.skills.get(str(created["_id"])))


@router.put("/{id}")
def update_skill(
    id: str,
    body: dict,
    _user: dict[str, Any] = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    existing = ctx.skills.get(id)
    if existing is None:
        raise not_found("Skill")

    skill = merge_patch(SkillIn, existing, body)
    updated = ctx.skills.replace(existing, normalize_skill(skill.to_document()))
    if updated is None:
        raise not_found("Skill")
    return to_api(updated)


@router.delete("/{id}")
def delete_skill(
    id: str,
    _user: dict[str, Any] = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    if not ctx.skills.delete(id):
        raise not_found("Skill")
    return deleted("Skill")
