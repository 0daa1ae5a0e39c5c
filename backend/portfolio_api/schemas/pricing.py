from __future__ import annotations

from typing import Any, Literal

from pydantic import Field, field_validator

from .common import Currency, Document, HexColor, LowerStr, ObjectIdStr, TrimmedStr, sluggable

PlanPeriod = Literal["one-time", "monthly", "yearly", "weekly", "hourly"]
PlanType = Literal["basic", "standard", "premium", "enterprise", "custom"]
PlanStatus = Literal["active", "inactive", "draft", "archived"]
SupportType = Literal["email", "phone", "chat", "priority"]

CURRENCY_SYMBOLS: dict[str, str] = {"USD": "$", "EUR": "€", "GBP": "£", "UGX": "UGX "}


class PlanPrice(Document):
    amount: float = Field(..., ge=0)
    currency: Currency = "USD"
    period: PlanPeriod = "one-time"
    originalAmount: float | None = Field(default=None, ge=0)


class PlanFeature(Document):
    name: TrimmedStr = Field(..., min_length=1)
    description: TrimmedStr | None = None
    included: bool = True
    icon: TrimmedStr | None = None


class PlanLimitation(Document):
    name: TrimmedStr = Field(..., min_length=1)
    value: str | int | float
    description: TrimmedStr | None = None


class PlanColor(Document):
    primary: HexColor = "#3B82F6"
    secondary: HexColor = "#1E40AF"
    accent: HexColor | None = None


class PlanSupport(Document):
    type: SupportType = "email"
    responseTime: TrimmedStr | None = None
    availability: TrimmedStr | None = None


class AddOn(Document):
    name: TrimmedStr = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    description: TrimmedStr | None = None


PlanName = sluggable(2, 50)


class PricingPlanIn(Document):
    name: PlanName
    title: TrimmedStr = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=10)
    shortDescription: str | None = Field(default=None, max_length=200)
    price: PlanPrice
    features: list[PlanFeature] = Field(default_factory=list)
    limitations: list[PlanLimitation] = Field(default_factory=list)
    category: TrimmedStr | None = None
    type: PlanType = "basic"
    isPopular: bool = False
    isFeatured: bool = False
    buttonText: TrimmedStr = "Get Started"
    buttonLink: TrimmedStr | None = Field(default=None, pattern=r"^(https?://|/|mailto:|tel:)")
    ribbonText: TrimmedStr | None = Field(default=None, max_length=20)
    color: PlanColor = Field(default_factory=PlanColor)
    services: list[ObjectIdStr] = Field(default_factory=list)
    benefits: list[TrimmedStr] = Field(default_factory=list)
    deliverables: list[TrimmedStr] = Field(default_factory=list)
    timeline: TrimmedStr | None = None
    revisions: int = Field(default=0, ge=0)
    support: PlanSupport | None = None
    addOns: list[AddOn] = Field(default_factory=list)
    requirements: list[TrimmedStr] = Field(default_factory=list)
    guarantees: list[TrimmedStr] = Field(default_factory=list)
    status: PlanStatus = "draft"
    sortOrder: int = 0
    seoTitle: str | None = Field(default=None, max_length=60)
    seoDescription: str | None = Field(default=None, max_length=160)
    seoKeywords: list[LowerStr] = Field(default_factory=list)

    @field_validator("buttonLink", mode="before")
    @classmethod
    def _empty_link(cls, v: str | None) -> str | None:
        return v or None


def _format_amount(amount: Any) -> str:
    if not isinstance(amount, (int, float)) or isinstance(amount, bool):
        return "0"
    if float(amount).is_integer():
        return f"{int(amount):,}"
    return f"{amount:,.3f}".rstrip("0").rstrip(".")


def with_derived_fields(plan: dict[str, Any]) -> dict[str, Any]:
    """Add discountPercentage, formattedPrice and conversionRate to an API plan dict."""
    price = plan.get("price") or {}
    amount = price.get("amount")
    original = price.get("originalAmount")

    discount = 0
    if isinstance(amount, (int, float)) and original and original > amount:
        discount = round((original - amount) / original * 100)

    currency = price.get("currency") or ""
    symbol = CURRENCY_SYMBOLS.get(currency, currency)

    analytics = plan.get("analytics") or {}
    clicks = analytics.get("clicks") or 0
    conversions = analytics.get("conversions") or 0
    rate = f"{conversions / clicks * 100:.2f}" if clicks > 0 else "0.00"

    return {
        **plan,
        "discountPercentage": discount,
        "formattedPrice": f"{symbol}{_format_amount(amount)}",
        "conversionRate": rate,
    }
