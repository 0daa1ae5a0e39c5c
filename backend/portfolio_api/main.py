from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import pydantic
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from .context import AppContext, build_context
from .db.mongo.errors import DbDuplicate, DbError, DbUnavailable, DbValidation
from .errors import ConfigurationError, ImageHostError
from .middleware.access_log import AccessLogMiddleware
from .middleware.cors import allow_credentials, build_allowed_origins
from .middleware.login_rate_limit import LoginRateLimitMiddleware
from .middleware.normalize_path import NormalizePathMiddleware
from .middleware.request_context import RequestContextMiddleware
from .observability.logging import configure_logging, get_logger
from .problem_details import problem_response
from .routers.auth import router as auth_router
from .routers.blog import router as blog_router
from .routers.content import router as content_router
from .routers.health import router as health_router
from .routers.pricing import router as pricing_router
from .routers.projects import router as projects_router
from .routers.services import router as services_router
from .routers.skills import router as skills_router
from .routers.uploads import router as uploads_router
from .routers.users import router as users_router
from .settings import Settings, get_settings


@asynccontextmanager
async def _lifespan(app: FastAPI):
    log = get_logger("startup")
    owned = app.state.context is None
    if owned:
        # Missing MONGO_URI / JWT_SECRET / CLOUDINARY_* aborts startup here.
        app.state.context = build_context(app.state.settings)
    log.info("app_started", settings=app.state.settings.to_log_safe_dict())
    try:
        yield
    finally:
        if owned:
            await app.state.context.aclose()
            app.state.context = None
        log.info("app_stopped")


def create_app(settings: Settings | None = None, context: AppContext | None = None) -> FastAPI:
    settings = settings or (context.settings if context else get_settings())

    # Logging must be configured before the app starts handling requests.
    configure_logging(
        level=str(settings.log_level or "INFO").upper(),
        fmt="console" if str(settings.log_format).strip().lower() == "console" else "json",
    )
    log = get_logger("startup")

    app = FastAPI(
        title="Portfolio CMS API",
        version="1.0.0",
        default_response_class=ORJSONResponse,
        # Trailing slashes are rewritten by NormalizePathMiddleware instead.
        redirect_slashes=False,
        lifespan=_lifespan,
    )
    app.state.settings = settings
    app.state.context = context

    api = settings.api_prefix.rstrip("/")
    allowed_origins = build_allowed_origins(settings)

    log.info("app_starting", settings=settings.to_log_safe_dict())

    # Middlewares (order matters; last added is outermost)
    app.add_middleware(
        LoginRateLimitMiddleware,
        path=f"{api}/auth/login",
        max_attempts=settings.login_rate_limit_max,
        window_seconds=settings.login_rate_limit_window_seconds,
    )
    app.add_middleware(AccessLogMiddleware, exclude_paths={"/"})
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=allow_credentials(allowed_origins),
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With", "X-Request-Id"],
        expose_headers=["X-Request-Id", "Retry-After"],
        max_age=3000,
    )
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(NormalizePathMiddleware, prefix=api)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(pydantic.ValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(DbError, _db_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ConfigurationError, _configuration_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ImageHostError, _image_host_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_exception_handler)

    # Routes
    app.include_router(health_router)
    app.include_router(auth_router, prefix=f"{api}/auth")
    app.include_router(users_router, prefix=f"{api}/users")
    app.include_router(blog_router, prefix=f"{api}/blog")
    app.include_router(projects_router, prefix=f"{api}/projects")
    app.include_router(services_router, prefix=f"{api}/services")
    app.include_router(skills_router, prefix=f"{api}/skills")
    app.include_router(pricing_router, prefix=f"{api}/pricing")
    app.include_router(content_router, prefix=f"{api}/content")
    app.include_router(uploads_router, prefix=f"{api}/upload")

    return app


def _request_fields(request: Request) -> dict[str, Any]:
    user = getattr(getattr(request, "state", None), "user", None)
    user_id = user.get("_id") if isinstance(user, dict) else None
    return {
        "http_method": str(getattr(request, "method", "") or "").upper() or None,
        "path": str(getattr(getattr(request, "url", None), "path", "") or ""),
        "user_id": str(user_id) if user_id else None,
    }


def _db_error_handler(request: Request, exc: DbError) -> Response:
    # Map storage-layer errors to stable HTTP semantics.
    status_code = 500
    title = "Storage Error"

    if isinstance(exc, DbDuplicate):
        status_code = 400
        title = "Duplicate entry"
    elif isinstance(exc, DbValidation):
        status_code = 400
        title = "Bad Request"
    elif isinstance(exc, DbUnavailable):
        status_code = 503
        title = "Service Unavailable"

    if status_code >= 500:
        get_logger("storage").error(
            "storage_error",
            operation=exc.operation,
            collection=exc.collection,
            code=exc.code,
            error=str(exc),
            cause=type(exc.cause).__name__ if exc.cause else None,
            **_request_fields(request),
        )

    # In production, problem_response already suppresses 5xx detail.
    return problem_response(
        request=request,
        status_code=status_code,
        title=title,
        detail=exc.message,
        extensions=exc.problem_extensions() or None,
    )


def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    status_code = int(getattr(exc, "status_code", 500) or 500)
    detail = getattr(exc, "detail", None)

    title: str | None = None
    extensions: dict | None = None
    safe_detail: str | None = None

    if isinstance(detail, dict):
        extensions = detail
        msg = detail.get("message")
        if isinstance(msg, str) and msg.strip():
            safe_detail = msg.strip()
    elif detail is not None:
        safe_detail = str(detail)

    if status_code == 404:
        title = "Not Found"
        safe_detail = safe_detail or "Route not found"

    return problem_response(
        request=request,
        status_code=status_code,
        title=title,
        detail=safe_detail,
        extensions=extensions,
        headers=getattr(exc, "headers", None),
    )


def _validation_error_handler(
    request: Request, exc: RequestValidationError | pydantic.ValidationError
) -> Response:
    errors: list[dict[str, object]] = []
    for e in exc.errors():
        loc = tuple(e.get("loc") or ())
        if isinstance(exc, pydantic.ValidationError):
            # Raised while validating a JSON body inside a handler.
            loc = ("body", *loc)
        loc_path = ".".join([str(x) for x in loc if x != "body"])
        errors.append(
            {
                "location": list(loc),
                "path": loc_path,
                "message": e.get("msg", "Invalid value"),
                "type": e.get("type"),
            }
        )
    return problem_response(
        request=request,
        status_code=400,
        title="Validation Failed",
        detail="Request validation failed",
        errors=errors,
    )


def _configuration_error_handler(request: Request, exc: ConfigurationError) -> Response:
    get_logger("config").error(
        "configuration_error", setting=exc.setting, error=str(exc), **_request_fields(request)
    )
    return problem_response(
        request=request,
        status_code=500,
        title="Server configuration error",
        detail=str(exc),
    )


def _image_host_error_handler(request: Request, exc: ImageHostError) -> Response:
    get_logger("uploads").error(
        "image_upload_failed",
        operation=exc.operation,
        upstream_status=exc.status_code,
        error=str(exc),
        **_request_fields(request),
    )
    return problem_response(
        request=request,
        status_code=500,
        title="Image deletion failed" if exc.operation == "destroy" else "Image upload failed",
        detail=str(exc),
    )


def _unhandled_exception_handler(request: Request, exc: Exception) -> Response:
    # Full traceback goes to the logs; the HTTP response stays generic.
    get_logger("unhandled").exception("unhandled_exception", **_request_fields(request))

    return problem_response(
        request=request,
        status_code=500,
        title="Internal Server Error",
        detail="Something went wrong",
    )


app = create_app()
