from __future__ import annotations

from typing import Literal

from pydantic import Field

from .common import Document, SeoBlock, TrimmedStr

ProjectCategory = Literal["web", "mobile", "desktop", "ai", "other"]
ProjectStatus = Literal["draft", "published", "archived"]


class ProjectIn(Document):
    title: TrimmedStr = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    content: str | None = None
    techStack: list[TrimmedStr] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    github: str | None = None
    liveDemo: str | None = None
    category: ProjectCategory = "web"
    featured: bool = False
    status: ProjectStatus = "draft"
    seo: SeoBlock = Field(default_factory=SeoBlock)
