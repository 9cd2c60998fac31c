from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import field_validator

from ..constants import UNASSIGNED
from .base import ApiModel, TenantRecord, naive_utc

ShiftStatus = Literal["scheduled", "published", "completed", "cancelled"]


def _normalize_user_id(value):
    """Map the "unassigned" sentinel and blanks to ``None``."""
    if value is None:
        return None
    if isinstance(value, str):
        cleaned = value.strip()
        if not cleaned or cleaned.lower() == UNASSIGNED:
            return None
        return cleaned
    return value


class ShiftRead(TenantRecord):
    location_id: int
    user_id: int | None = None
    start_time: datetime
    end_time: datetime
    position: str | None = None
    notes: str | None = None
    status: str
    created_at: datetime | None = None


class ShiftCreate(ApiModel):
    location_id: int
    user_id: int | None = None
    start_time: datetime
    end_time: datetime
    position: str | None = None
    notes: str | None = None
    status: ShiftStatus = "scheduled"

    @field_validator("user_id", mode="before")
    @classmethod
    def normalize_user_id(cls, value):
        return _normalize_user_id(value)

    @field_validator("start_time", "end_time")
    @classmethod
    def to_naive_utc(cls, value: datetime | None) -> datetime | None:
        return naive_utc(value)


class ShiftUpdate(ApiModel):
    location_id: int | None = None
    user_id: int | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    position: str | None = None
    notes: str | None = None
    status: ShiftStatus | None = None

    @field_validator("user_id", mode="before")
    @classmethod
    def normalize_user_id(cls, value):
        return _normalize_user_id(value)

    @field_validator("start_time", "end_time")
    @classmethod
    def to_naive_utc(cls, value: datetime | None) -> datetime | None:
        return naive_utc(value)
