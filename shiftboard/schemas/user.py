from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import EmailStr, Field, field_validator

from ..constants import MIN_PASSWORD_LENGTH
from .base import ApiModel, TenantRecord, blank_to_none


class UserRead(TenantRecord):
    """Public view of a user; the password hash is never part of it."""

    email: EmailStr
    first_name: str
    last_name: str
    phone: str | None = None
    role: str
    hourly_rate: Decimal | None = None
    position: str | None = None
    is_active: bool
    created_at: datetime | None = None


class UserCreate(ApiModel):
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    phone: str | None = None
    role: Literal["manager", "employee"] = "employee"
    position: str | None = None
    hourly_rate: Decimal | None = Field(default=None, ge=0)

    @field_validator("phone", "position", "hourly_rate", mode="before")
    @classmethod
    def blank_optional(cls, value):
        return blank_to_none(value)


class UserUpdate(ApiModel):
    email: EmailStr | None = None
    first_name: str | None = Field(default=None, min_length=1)
    last_name: str | None = Field(default=None, min_length=1)
    phone: str | None = None
    position: str | None = None
    role: Literal["owner", "manager", "employee"] | None = None
    hourly_rate: Decimal | None = Field(default=None, ge=0)
    is_active: bool | None = None

    @field_validator("phone", "position", "hourly_rate", mode="before")
    @classmethod
    def blank_optional(cls, value):
        return blank_to_none(value)
