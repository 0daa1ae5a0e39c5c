from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from ..auth.dependencies import get_current_user
from ..context import AppContext, get_context
from ..db.mongo.pagination import PageRequest
from ..db.mongo.serialize import to_api
from ..domain.normalize import normalize_blog_post
from ..domain.queries import BLOG_ADMIN_SORT, BLOG_PUBLIC_SORT, BlogQuery
from ..schemas.blog import BlogCategory, BlogPostIn, BlogStatus
from ._shared import deleted, merge_patch, not_found, page_request, paginated

router = APIRouter(tags=["blog"])


@router.get("")
def list_posts(
    category: BlogCategory | None = None,
    tag: str | None = Query(None, max_length=50),
    status: BlogStatus | None = None,
    search: str | None = Query(None, max_length=100),
    pr: PageRequest = Depends(page_request),
    ctx: AppContext = Depends(get_context),
):
    q = BlogQuery(category=category, tag=tag, status=status, search=search)
    page = ctx.blog.page(q.to_filter(public=True), request=pr, sort=BLOG_PUBLIC_SORT)
    return paginated(ctx.blog.with_authors(page.items), page)


@router.get("/admin/all")
def list_all_posts(
    category: BlogCategory | None = None,
    tag: str | None = Query(None, max_length=50),
    status: BlogStatus | None = None,
    search: str | None = Query(None, max_length=100),
    pr: PageRequest = Depends(page_request),
    _user: dict[str, Any] = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    q = BlogQuery(category=category, tag=tag, status=status, search=search)
    page = ctx.blog.page(q.to_filter(public=False), request=pr, sort=BLOG_ADMIN_SORT)
    return paginated(ctx.blog.with_authors(page.items), page)


@router.get("/post/{slug}")
@router.get("/{slug}")
def get_post(slug: str, ctx: AppContext = Depends(get_context)):
    post = ctx.blog.get_published(slug)
    if post is None:
        raise not_found("Blog post")
    return to_api(post)


@router.post("", status_code=201)
def create_post(
    body: dict,
    user: dict[str, Any] = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    post = BlogPostIn.model_validate(body)
    doc = normalize_blog_post(post.to_document())
    doc["author"] = user["_id"]
    created = ctx.blog.create(doc)
    return to_api(ctx.blog.with_author(ctx.blog.get(str(created["_id"]))))


@router.put("/{id}")
def update_post(
    id: str,
    body: dict,
    _user: dict[str, Any] = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    existing = ctx.blog.get(id)
    if existing is None:
        raise not_found("Blog post")

    post = merge_patch(BlogPostIn, existing, body)
    updated = ctx.blog.replace(existing, normalize_blog_post(post.to_document()))
    if updated is None:
        raise not_found("Blog post")
    return to_api(ctx.blog.with_author(updated))


@router.delete("/{id}")
def delete_post(
    id: str,
    _user: dict[str, Any] = Depends(get_current_user),
    ctx: AppContext = Depends(get_context),
):
    if not ctx.blog.delete(id):
        raise not_found("Blog post")
    return deleted("Blog post")
