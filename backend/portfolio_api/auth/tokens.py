from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt

from ..errors import ConfigurationError
from ..settings import Settings

ALGORITHM = "HS256"


class InvalidToken(Exception):
    pass


@dataclass
class VerifiedToken:
    sub: str
    issued_at: datetime | None
    expires_at: datetime | None
    claims: dict[str, Any]


def signing_secret(settings: Settings) -> str:
    secret = str(settings.jwt_secret or "").strip()
    if not secret:
        raise ConfigurationError("JWT secret is not configured", setting="JWT_SECRET")
    return secret


def issue_token(user_id: str, *, settings: Settings, now: datetime | None = None) -> str:
    issued = now or datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "iat": int(issued.timestamp()),
        "exp": int((issued + timedelta(days=settings.jwt_expires_days)).timestamp()),
    }
    return jwt.encode(claims, signing_secret(settings), algorithm=ALGORITHM)


def verify_token(token: str, *, settings: Settings) -> VerifiedToken:
    if not token:
        raise InvalidToken("missing token")
    secret = signing_secret(settings)
    try:
        claims = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except ExpiredSignatureError as e:
        raise InvalidToken("token expired") from e
    except JWTError as e:
        raise InvalidToken("invalid token") from e

    sub = str(claims.get("sub") or "").strip()
    if not sub:
        raise InvalidToken("missing sub")

    def _ts(key: str) -> datetime | None:
        v = claims.get(key)
        return datetime.fromtimestamp(int(v), tz=timezone.utc) if v is not None else None

    return VerifiedToken(sub=sub, issued_at=_ts("iat"), expires_at=_ts("exp"), claims=claims)
