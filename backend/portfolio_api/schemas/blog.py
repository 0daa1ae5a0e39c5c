from __future__ import annotations

from typing import Literal

from pydantic import Field

from .common import Document, LowerStr, SeoBlock, UtcDatetime, sluggable

BlogCategory = Literal["technology", "design", "development", "tutorial", "opinion", "news"]
BlogStatus = Literal["draft", "published", "archived"]


BlogTitle = sluggable(1, 200)


class BlogPostIn(Document):
    title: BlogTitle
    content: str = Field(..., min_length=1)
    excerpt: str | None = Field(default=None, max_length=300)
    featuredImage: str | None = None
    category: BlogCategory = "technology"
    tags: list[LowerStr] = Field(default_factory=list)
    status: BlogStatus = "draft"
    publishedAt: UtcDatetime | None = None
    seo: SeoBlock = Field(default_factory=SeoBlock)
