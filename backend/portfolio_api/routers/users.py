from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from ..auth.dependencies import require_admin
from ..auth.passwords import hash_password
from ..context import AppContext, get_context
from ..db.mongo.serialize import to_api, to_api_list
from ..domain.queries import USER_SORT
from ..repositories.users_repo import WITHOUT_PASSWORD
from ..schemas.users import UserCreate, UserFields
from ._shared import deleted, merge_patch, not_found

router = APIRouter(tags=["users"], dependencies=[Depends(require_admin)])


def _without_password(user: dict[str, Any] | None) -> dict[str, Any] | None:
    if user is None:
        return None
    return {k: v for k, v in user.items() if k != "password"}


@router.get("")
def list_users(ctx: AppContext = Depends(get_context)):
    return to_api_list(ctx.users.list({}, sort=USER_SORT, projection=WITHOUT_PASSWORD))


@router.post("", status_code=201)
def create_user(body: UserCreate, ctx: AppContext = Depends(get_context)):
    if ctx.users.exists(username=body.username, email=body.email):
        raise HTTPException(status_code=400, detail="User already exists")

    user = ctx.users.create(
        {
            "username": body.username,
            "email": body.email,
            "password": hash_password(body.password),
            "role": body.role,
            "isActive": True,
        }
    )
    return to_api(_without_password(user))


@router.put("/{id}")
def update_user(id: str, body: dict, ctx: AppContext = Depends(get_context)):
    existing = ctx.users.get(id)
    if existing is None:
        raise not_found("User")

    fields = merge_patch(UserFields, existing, body)
    if ctx.users.exists(username=fields.username, email=fields.email, exclude_id=existing["_id"]):
        raise HTTPException(status_code=400, detail="Username or email already in use")

    updated = ctx.users.replace(existing, fields.to_document())
    if updated is None:
        raise not_found("User")
    return to_api(_without_password(updated))


@router.delete("/{id}")
def delete_user(id: str, ctx: AppContext = Depends(get_context)):
    if not ctx.users.delete(id):
        raise not_found("User")
    return deleted("User")
