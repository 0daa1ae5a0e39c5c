from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from ..auth.dependencies import get_current_user
from ..auth.passwords import hash_password, verify_against_dummy, verify_password
from ..auth.tokens import issue_token, signing_secret
from ..context import AppContext, get_context
from ..db.mongo.serialize import to_api
from ..observability.logging import get_logger
from ..schemas.users import LoginRequest, RegisterRequest

router = APIRouter(tags=["auth"])
log = get_logger("auth")

INVALID_CREDENTIALS = "Invalid credentials"


def _public_user(user: dict[str, Any], *, with_profile: bool = False) -> dict[str, Any]:
    out = {
        "id": str(user["_id"]),
        "username": user.get("username"),
        "email": user.get("email"),
        "role": user.get("role"),
    }
    if with_profile:
        out["profile"] = to_api(user.get("profile")) if isinstance(user.get("profile"), dict) else None
    return out


@router.post("/register", status_code=201)
def register(body: RegisterRequest, ctx: AppContext = Depends(get_context)):
    if not ctx.settings.registration_enabled:
        raise HTTPException(status_code=403, detail="Registration is disabled")
    signing_secret(ctx.settings)

    if ctx.users.exists(username=body.username, email=body.email):
        raise HTTPException(status_code=400, detail="User already exists")

    user = ctx.users.create(
        {
            "username": body.username,
            "email": body.email,
            "password": hash_password(body.password),
            # Self-registered accounts own the site.
            "role": "admin",
            "isActive": True,
        }
    )
    token = issue_token(str(user["_id"]), settings=ctx.settings)
    log.info("user_registered", user_id=str(user["_id"]))
    return {
        "message": "User created successfully",
        "token": token,
        "user": _public_user(user),
    }


@router.post("/login")
def login(body: LoginRequest, ctx: AppContext = Depends(get_context)):
    user = ctx.users.find_active_by_login(body.username)
    if user is None:
        verify_against_dummy(body.password)
        log.info("login_failed", reason="unknown_user")
        raise HTTPException(status_code=400, detail=INVALID_CREDENTIALS)

    if not verify_password(body.password, user.get("password")):
        log.info("login_failed", reason="bad_password", user_id=str(user["_id"]))
        raise HTTPException(status_code=400, detail=INVALID_CREDENTIALS)

    token = issue_token(str(user["_id"]), settings=ctx.settings)
    return {
        "message": "Login successful",
        "token": token,
        "user": _public_user(user, with_profile=True),
    }


@router.get("/me")
def me(user: dict[str, Any] = Depends(get_current_user)):
    return {"user": to_api(user)}
