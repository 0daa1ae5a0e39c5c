from __future__ import annotations

from typing import Any, Awaitable, Callable


class NormalizePathMiddleware:
    """
    Strip trailing slashes from API paths by rewriting the ASGI scope.

    The app runs with `redirect_slashes=False`, so `/api/blog/` would
    otherwise be a hard 404 instead of matching `/api/blog`.
    """

    def __init__(self, app: Callable[..., Awaitable[Any]], *, prefix: str = "/api"):
        self.app = app
        self._prefix = prefix.rstrip("/") + "/"

    async def __call__(self, scope: dict, receive: Callable, send: Callable):
        if scope.get("type") == "http":
            path = str(scope.get("path") or "")
            if path != "/" and path.endswith("/") and path.startswith(self._prefix):
                new_path = path.rstrip("/")
                scope["path"] = new_path
                if isinstance(scope.get("raw_path"), (bytes, bytearray)):
                    scope["raw_path"] = new_path.encode("utf-8")
        return await self.app(scope, receive, send)
