from __future__ import annotations

from typing import Literal

from pydantic import Field

from .common import Document, HttpUrl, ImageUrl, TrimmedStr, UtcDatetime, sluggable

SkillLevel = Literal["beginner", "intermediate", "advanced", "expert"]
SkillStatus = Literal["active", "inactive"]


class Certification(Document):
    name: TrimmedStr = Field(..., min_length=1)
    issuer: TrimmedStr = Field(..., min_length=1)
    date: UtcDatetime
    url: HttpUrl | None = None


class SkillProject(Document):
    name: TrimmedStr = Field(..., min_length=1)
    description: TrimmedStr = Field(..., min_length=1)
    url: HttpUrl | None = None


SkillName = sluggable(2, 50)


class SkillIn(Document):
    name: SkillName
    level: SkillLevel = "beginner"
    category: TrimmedStr | None = None
    description: TrimmedStr | None = None
    image: ImageUrl | None = None
    icon: TrimmedStr | None = None
    yearsOfExperience: float | None = Field(default=None, ge=0, le=50)
    certifications: list[Certification] = Field(default_factory=list)
    projects: list[SkillProject] = Field(default_factory=list)
    proficiencyPercentage: float | None = Field(default=None, ge=0, le=100)
    status: SkillStatus = "active"
    featured: bool = False
    sortOrder: int = 0
