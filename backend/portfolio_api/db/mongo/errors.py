from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# Server error codes the API distinguishes.
DUPLICATE_KEY = 11000
DOCUMENT_VALIDATION_FAILURE = 121


@dataclass(slots=True)
class DbError(Exception):
    """A failed MongoDB call, rendered by the app as a problem+json response.

    `code` is the server error code when the server reported one (network
    failures have none).
    """

    message: str
    operation: str | None = None
    collection: str | None = None
    key: dict[str, Any] | None = None
    code: int | None = None
    cause: Exception | None = None

    def __str__(self) -> str:
        return self.message

    def problem_extensions(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "operation": self.operation,
            "collection": self.collection,
            "key": {str(k): str(v) for k, v in self.key.items()} if self.key else None,
            "code": self.code,
        }
        return {k: v for k, v in out.items() if v is not None}


@dataclass(slots=True)
class DbDuplicate(DbError):
    """A unique index rejected the write; `key_pattern` names the index fields."""

    key_pattern: dict[str, Any] | None = None

    @property
    def fields(self) -> list[str]:
        return [str(f) for f in (self.key_pattern or self.key or {})]

    def problem_extensions(self) -> dict[str, Any]:
        out = DbError.problem_extensions(self)
        if self.fields:
            out["fields"] = self.fields
        return out


@dataclass(slots=True)
class DbValidation(DbError):
    """Malformed identifier/document, or server-side schema validation failure."""


@dataclass(slots=True)
class DbUnavailable(DbError):
    """No server could be selected or the connection dropped."""


@dataclass(slots=True)
class DbInternal(DbError):
    pass
