from __future__ import annotations

import logging
import sys
from typing import Literal

import structlog

from .context import get_request_id

SERVICE_NAME = "portfolio-api"

LogFormat = Literal["json", "console"]

# Third-party loggers that are noisy below WARNING (driver heartbeats,
# connection pool events, per-request client lines).
_QUIET_LOGGERS = ("pymongo", "httpx", "httpcore", "passlib")


def _add_request_id(_: logging.Logger, __: str, event_dict: dict) -> dict:
    rid = get_request_id()
    if rid:
        event_dict["request_id"] = rid
    return event_dict


def _add_service(_: logging.Logger, __: str, event_dict: dict) -> dict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def _shared_processors() -> list:
    return [
        _add_request_id,
        _add_service,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


_CONFIGURED = False


def configure_logging(*, level: str | int = "INFO", fmt: LogFormat = "json") -> None:
    """
    Route stdlib logging and structlog through one stdout handler.

    `json` emits one JSON object per line (the deployed format); `console`
    renders key=value lines for local development. Only the first call
    takes effect.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    renderer = (
        structlog.dev.ConsoleRenderer(colors=False)
        if fmt == "console"
        else structlog.processors.JSONRenderer()
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=_shared_processors(),
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    # uvicorn's own handlers would bypass the formatter above.
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uv = logging.getLogger(name)
        uv.handlers = []
        uv.propagate = True

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    _CONFIGURED = True


def get_logger(name: str | None = None):
    return structlog.get_logger(name)
