from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator

from .base import ApiModel, TenantRecord


def _validate_timezone(value: str | None) -> str | None:
    if value is None:
        return value
    candidate = value.strip()
    try:
        ZoneInfo(candidate)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError("Invalid timezone selection") from exc
    return candidate


class LocationRead(TenantRecord):
    name: str
    address: str | None = None
    timezone: str
    is_active: bool
    created_at: datetime | None = None


class LocationCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=120)
    address: str | None = None
    timezone: str | None = None

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, value: str | None) -> str | None:
        return _validate_timezone(value)


class LocationUpdate(ApiModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    address: str | None = None
    timezone: str | None = None
    is_active: bool | None = None

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, value: str | None) -> str | None:
        return _validate_timezone(value)
