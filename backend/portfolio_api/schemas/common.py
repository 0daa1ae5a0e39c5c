from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Annotated, Literal

from bson import ObjectId
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StringConstraints

Currency = Literal["USD", "EUR", "GBP", "UGX"]

_IMAGE_URL = re.compile(r"^https?://.+\.(jpg|jpeg|png|webp|gif)$", re.IGNORECASE)
_HTTP_URL = re.compile(r"^https?://.+")
_HEX_COLOR = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")
_HAS_ALNUM = re.compile(r"[A-Za-z0-9]")


def _image_url(v: str) -> str:
    if not _IMAGE_URL.match(v):
        raise ValueError("Please provide a valid image URL")
    return v


def _http_url(v: str) -> str:
    if not _HTTP_URL.match(v):
        raise ValueError("Please provide a valid URL")
    return v


def _hex_color(v: str) -> str:
    if not _HEX_COLOR.match(v):
        raise ValueError("Please provide a valid hex color")
    return v


def _object_id(v: str) -> str:
    if not ObjectId.is_valid(v) or len(v) != 24:
        raise ValueError("Invalid id")
    return v


def _sluggable(v: str) -> str:
    if not _HAS_ALNUM.search(v):
        raise ValueError("Must contain at least one letter or digit")
    return v


def _utc(v: datetime) -> datetime:
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)


TrimmedStr = Annotated[str, StringConstraints(strip_whitespace=True)]
LowerStr = Annotated[str, StringConstraints(strip_whitespace=True, to_lower=True)]
ImageUrl = Annotated[str, StringConstraints(strip_whitespace=True), AfterValidator(_image_url)]
HttpUrl = Annotated[str, StringConstraints(strip_whitespace=True), AfterValidator(_http_url)]
HexColor = Annotated[str, AfterValidator(_hex_color)]
ObjectIdStr = Annotated[str, StringConstraints(strip_whitespace=True), AfterValidator(_object_id)]
UtcDatetime = Annotated[datetime, AfterValidator(_utc)]


def sluggable(min_length: int, max_length: int):
    return Annotated[
        str,
        StringConstraints(strip_whitespace=True, min_length=min_length, max_length=max_length),
        AfterValidator(_sluggable),
    ]


class Document(BaseModel):
    """Base for stored-document schemas: unknown keys are dropped."""

    model_config = ConfigDict(extra="ignore")

    def to_document(self) -> dict:
        return self.model_dump(exclude_none=True)


class SeoBlock(Document):
    title: str | None = Field(default=None, max_length=60)
    description: str | None = Field(default=None, max_length=160)
    keywords: list[TrimmedStr] = Field(default_factory=list)
    ogImage: str | None = None
