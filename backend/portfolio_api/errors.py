from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class ConfigurationError(Exception):
    """A setting the current operation depends on is missing or unusable."""

    message: str
    setting: str | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class ImageHostError(Exception):
    """The image host rejected a request or could not be reached."""

    message: str
    operation: str | None = None
    status_code: int | None = None
    cause: Exception | None = None

    def __str__(self) -> str:
        return self.message
