from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, EmailStr, Field, StringConstraints, field_validator

from .common import Document, TrimmedStr

Role = Literal["admin", "editor"]

# Length limits apply to the trimmed value.
Username = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=30)]


def _lower_email(v: str) -> str:
    return str(v).strip().lower()


class Profile(Document):
    firstName: TrimmedStr | None = None
    lastName: TrimmedStr | None = None
    avatar: str | None = None


class RegisterRequest(BaseModel):
    username: Username
    email: EmailStr
    password: str = Field(..., min_length=6)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, v: str) -> str:
        return _lower_email(v)


class LoginRequest(BaseModel):
    # Username or email.
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserCreate(RegisterRequest):
    role: Role = "editor"


class UserFields(Document):
    """Editable user fields; validated against the merged stored record."""

    username: Username
    email: EmailStr
    role: Role = "editor"
    isActive: bool = True
    profile: Profile | None = None

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, v: str) -> str:
        return _lower_email(v)
