from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from ..auth.dependencies import get_current_user
from ..context import AppContext, get_context
from ..db.mongo.pagination import PageRequest
from ..db.mongo.serialize import parse_object_id, to_api
from ..domain.queries import PROJECT_ADMIN_SORT, PROJECT_SORT, ProjectQuery
from ..schemas.projects import ProjectCategory, ProjectIn, ProjectStatus
from ._shared import deleted, merge_patch, not_found, page_request, paginated

router = APIRouter(tags=["projects"])


@router.get("")
def list_projects(
    category: ProjectCategory | None = None,
    featured: bool | None = None,
    status: ProjectStatus | None = None,
    search: str | None = Query(None, max_length=100),
    pr: PageRequest = Depends(page_request),
    ctx: AppContext = Depends(get_context),
):
    q = ProjectQuery(category=category, featured=featured, status=status, search=search)
    page = ctx.projects.page(q.to_filter(public=True), request=pr, sort=PROJECT_SORT)
    return paginated(ctx.projects.with_creators(page.items), page)


@router.get("/admin/all")
def list_all_projects(
    category: ProjectCategory | None = None,
    featured: bool | None = None,
    status: ProjectStatus | None = None,
    search: str | None = Query(None, max_length=100),
    pr: PageRequest = Depends(page_request),
    _user: dict[str, Any] = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    q = ProjectQuery(category=category, featured=featured, status=status, search=search)
    page = ctx.projects.page(q.to_filter(public=False), request=pr, sort=PROJECT_ADMIN_SORT)
    return paginated(ctx.projects.with_creators(page.items), page)


@router.get("/{id}")
def get_project(id: str, ctx: AppContext = Depends(get_context)):
    oid = parse_object_id(id)
    project = ctx.projects.find_one({"_id": oid, "status": "published"}) if oid else None
    if project is None:
        raise not_found("Project")
    return to_api(ctx.projects.with_creator(project))


@router.post("", status_code=201)
def create_project(
    body: dict,
    user: dict[str, Any] = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    doc = ProjectIn.model_validate(body).to_document()
    doc["createdBy"] = user["_id"]
    created = ctx.projects.create(doc)
    return to_api(ctx.projects.with_creator(ctx.projects.get(str(created["_id"]))))


@router.put("/{id}")
def update_project(
    id: str,
    body: dict,
    _user: dict[str, Any] = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    existing = ctx.projects.get(id)
    if existing is None:
        raise not_found("Project")

    project = merge_patch(ProjectIn, existing, body)
    updated = ctx.projects.replace(existing, project.to_document())
    if updated is None:
        raise not_found("Project")
    return to_api(ctx.projects.with_creator(updated))


@router.delete("/{id}")
def delete_project(
    id: str,
    _user: dict[str, Any] = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    if not ctx.projects.delete(id):
        raise not_found("Project")
    return deleted("Project")
