from __future__ import annotations

import time
from dataclasses import dataclass

from cachetools import TTLCache
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..observability.logging import get_logger
from ..problem_details import problem_response

_MAX_TRACKED_CLIENTS = 10_000


@dataclass
class _Bucket:
    window_start: float
    count: int


class LoginRateLimitMiddleware(BaseHTTPMiddleware):
    """
    Fixed-window throttle on `POST {prefix}/auth/login`, keyed by client IP.

    Every attempt counts, successful or not. State is in-memory per process.
    """

    def __init__(self, app, *, path: str, max_attempts: int, window_seconds: int):
        super().__init__(app)
        self._path = path
        self._max = max(1, int(max_attempts))
        self._window = float(max(1, int(window_seconds)))
        self._buckets: TTLCache[str, _Bucket] = TTLCache(
            maxsize=_MAX_TRACKED_CLIENTS, ttl=self._window
        )
        self._log = get_logger("login_rate_limit")

    def _client_key(self, request: Request) -> str:
        # Prefer X-Forwarded-For when behind a proxy, fallback to client.host.
        xff = (request.headers.get("x-forwarded-for") or "").strip()
        ip = xff.split(",")[0].strip() if xff else ""
        if not ip and request.client:
            ip = request.client.host or ""
        return ip or "unknown"

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.method.upper() != "POST" or request.url.path.rstrip("/") != self._path:
            return await call_next(request)

        key = self._client_key(request)
        now = time.monotonic()

        b = self._buckets.get(key)
        if b is None or (now - b.window_start) >= self._window:
            b = _Bucket(window_start=now, count=0)
        b.count += 1
        self._buckets[key] = b

        if b.count > self._max:
            retry_after = int(max(1.0, self._window - (now - b.window_start)))
            self._log.info("login_rate_limited", client_ip=key, attempts=b.count)
            return problem_response(
                request=request,
                status_code=429,
                detail="Too many login attempts, please try again later.",
                headers={"Retry-After": str(retry_after)},
            )

        return await call_next(request)
