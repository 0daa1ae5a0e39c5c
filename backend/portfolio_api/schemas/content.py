from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from .common import Document, TrimmedStr

PageKey = Literal["home", "about", "contact", "services"]


class ContentSeo(Document):
    title: str | None = Field(default=None, max_length=60)
    description: str | None = Field(default=None, max_length=160)
    keywords: list[TrimmedStr] = Field(default_factory=list)
    ogImage: str | None = None
    ogTitle: str | None = Field(default=None, max_length=60)
    ogDescription: str | None = Field(default=None, max_length=160)
    canonicalUrl: str | None = None


class PageContentIn(Document):
    data: Any = None
    seo: ContentSeo | None = None
    isPublished: bool = False
