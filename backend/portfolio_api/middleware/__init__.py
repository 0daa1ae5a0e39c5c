from __future__ import annotations

from .access_log import AccessLogMiddleware
from .login_rate_limit import LoginRateLimitMiddleware
from .normalize_path import NormalizePathMiddleware
from .request_context import RequestContextMiddleware

__all__ = [
    "AccessLogMiddleware",
    "LoginRateLimitMiddleware",
    "NormalizePathMiddleware",
    "RequestContextMiddleware",
]
