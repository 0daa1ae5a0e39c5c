from __future__ import annotations

import re
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from ..observability.context import request_id_var

# Ids echoed into logs and response headers: short, printable, no spaces.
_SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:\-]{1,128}$")

HEADER = "X-Request-Id"


def _inbound_id(request: Request) -> str | None:
    v = str(request.headers.get("x-request-id") or "").strip()
    return v if _SAFE_REQUEST_ID.match(v) else None


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tag every request with an id, reusing a well-formed inbound X-Request-Id."""

    async def dispatch(self, request: Request, call_next):
        request_id = _inbound_id(request) or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers[HEADER] = request_id
        return response
