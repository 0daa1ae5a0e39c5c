from __future__ import annotations

from typing import Any, Callable, TypeVar

from bson.errors import InvalidDocument, InvalidId
from pymongo.errors import (
    ConnectionFailure,
    DuplicateKeyError,
    OperationFailure,
    PyMongoError,
    ServerSelectionTimeoutError,
)

from .errors import (
    DOCUMENT_VALIDATION_FAILURE,
    DUPLICATE_KEY,
    DbDuplicate,
    DbError,
    DbInternal,
    DbUnavailable,
    DbValidation,
)

T = TypeVar("T")


def _details(e: OperationFailure) -> dict[str, Any]:
    return e.details if isinstance(e.details, dict) else {}


def _as_dict(v: Any) -> dict[str, Any] | None:
    return dict(v) if isinstance(v, dict) else None


def _duplicate(
    e: OperationFailure,
    *,
    operation: str,
    collection: str | None,
    key: dict[str, Any] | None,
) -> DbDuplicate:
    details = _details(e)
    return DbDuplicate(
        message="Duplicate entry",
        operation=operation,
        collection=collection,
        key=_as_dict(details.get("keyValue")) or key,
        code=e.code,
        key_pattern=_as_dict(details.get("keyPattern")),
        cause=e,
    )


def _map_pymongo_error(
    *,
    operation: str,
    collection: str | None,
    key: dict[str, Any] | None,
    exc: Exception,
) -> DbError:
    ctx: dict[str, Any] = {"operation": operation, "collection": collection, "key": key}

    # Bulk and find-and-modify paths report E11000 as a plain OperationFailure.
    if isinstance(exc, DuplicateKeyError) or (
        isinstance(exc, OperationFailure) and exc.code == DUPLICATE_KEY
    ):
        return _duplicate(exc, **ctx)

    if isinstance(exc, (InvalidId, InvalidDocument)):
        return DbValidation(message="Invalid document or identifier", cause=exc, **ctx)

    if isinstance(exc, OperationFailure):
        if exc.code == DOCUMENT_VALIDATION_FAILURE:
            return DbValidation(message="Document failed validation", code=exc.code, cause=exc, **ctx)
        return DbInternal(
            message=f"Database operation failed: {_details(exc).get('codeName') or exc.code}",
            code=exc.code,
            cause=exc,
            **ctx,
        )

    if isinstance(exc, ServerSelectionTimeoutError):
        return DbUnavailable(message="No database server available", cause=exc, **ctx)
    if isinstance(exc, ConnectionFailure):
        return DbUnavailable(message="Database connection lost", cause=exc, **ctx)

    if isinstance(exc, PyMongoError):
        return DbInternal(message=f"Database request failed ({type(exc).__name__})", cause=exc, **ctx)

    return DbInternal(message="Unexpected database error", cause=exc, **ctx)


def db_call(
    operation: str,
    fn: Callable[[], T],
    *,
    collection: str | None = None,
    key: dict[str, Any] | None = None,
) -> T:
    """Run a single driver call, translating failures into typed storage errors.

    Calls are never retried here; the driver's own retryable reads/writes are
    the only retry policy.
    """
    try:
        return fn()
    except DbError:
        raise
    except Exception as e:  # noqa: BLE001
        raise _map_pymongo_error(
            operation=operation,
            collection=collection,
            key=key,
            exc=e,
        ) from e
