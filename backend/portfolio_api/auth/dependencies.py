from __future__ import annotations

from typing import Any

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..context import AppContext, get_context
from ..observability.logging import get_logger
from ..repositories.users_repo import WITHOUT_PASSWORD
from .tokens import InvalidToken, verify_token

log = get_logger("auth")

_bearer = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    ctx: AppContext = Depends(get_context),
) -> dict[str, Any]:
    """
    Resolve the bearer token to an active stored user (password excluded).

    Any failure is a 401; a missing signing secret surfaces as a
    ConfigurationError (500) instead.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=401, detail="Access denied. No token provided.")

    try:
        verified = verify_token(credentials.credentials, settings=ctx.settings)
    except InvalidToken as e:
        log.info("auth_token_rejected", reason=str(e), path=request.url.path)
        raise HTTPException(status_code=401, detail="Invalid token") from e

    user = ctx.users.get(verified.sub, projection=WITHOUT_PASSWORD)
    if user is None or not user.get("isActive", True):
        raise HTTPException(status_code=401, detail="Invalid token or user not active")

    request.state.user = user
    return user


def require_admin(user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    if user.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Insufficient permissions")
    return user
