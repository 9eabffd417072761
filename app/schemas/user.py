# app/schemas/user.py
from datetime import datetime
from typing import Literal

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

# App-level roles. "guest" = no token, so we don't store it here.
Role = Literal["user", "admin"]


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("field cannot be empty")
    return v


def _normalize_phone(v: str | None) -> str | None:
    if v is None:
        return v
    digits = "".join(ch for ch in v if ch.isdigit())
    if not digits:
        return None
    if not 10 <= len(digits) <= 13:
        raise ValueError("phone must have between 10 and 13 digits")
    return digits


class UserRegister(SQLModel):
    """
    Payload for account creation.
    """

    model_config = ConfigDict(extra="forbid")

    username: str = Field(max_length=50)
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)
    phone: str | None = None

    @field_validator("username")
    @classmethod
    def normalize_username(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("phone")
    @classmethod
    def normalize_phone(cls, v: str | None) -> str | None:
        return _normalize_phone(v)


class UserLogin(SQLModel):
    """Credentials submitted to /auth/login."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str


class UserRead(SQLModel):
    """Response schema returned to clients."""

    id: int
    username: str
    email: str
    phone: str | None = None
    role: Role
    created_at: datetime


class LoginResponse(SQLModel):
    token: str
    user: UserRead


class UserUpdate(SQLModel):
    """
    Partial profile update for authenticated users.
    Editable fields: `username`, `phone`.
    """

    model_config = ConfigDict(extra="forbid")

    username: str | None = Field(default=None, max_length=50)
    phone: str | None = None

    @field_validator("username")
    @classmethod
    def normalize_username(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return _strip_required(v)

    @field_validator("phone")
    @classmethod
    def normalize_phone(cls, v: str | None) -> str | None:
        return _normalize_phone(v)
