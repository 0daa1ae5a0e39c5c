from __future__ import annotations

from typing import Literal

from pydantic import Field

from .common import Currency, Document, ImageUrl, LowerStr, TrimmedStr, sluggable

ServiceStatus = Literal["active", "inactive", "draft"]
PriceType = Literal["fixed", "hourly", "project"]


class ServicePrice(Document):
    amount: float | None = Field(default=None, ge=0)
    currency: Currency = "USD"
    type: PriceType = "fixed"


ServiceTitle = sluggable(3, 100)


class ServiceIn(Document):
    title: ServiceTitle
    description: str = Field(..., min_length=10)
    shortDescription: str | None = Field(default=None, max_length=200)
    image: ImageUrl | None = None
    gallery: list[ImageUrl] = Field(default_factory=list)
    price: ServicePrice | None = None
    duration: TrimmedStr | None = None
    features: list[TrimmedStr] = Field(default_factory=list)
    tags: list[LowerStr] = Field(default_factory=list)
    category: TrimmedStr | None = None
    status: ServiceStatus = "draft"
    featured: bool = False
    seoTitle: str | None = Field(default=None, max_length=60)
    seoDescription: str | None = Field(default=None, max_length=160)
    seoKeywords: list[LowerStr] = Field(default_factory=list)
    sortOrder: int = 0
