from __future__ import annotations

from pydantic import Field

from .base import ApiModel, TenantRecord

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class AvailabilityRead(TenantRecord):
    user_id: int
    day_of_week: int
    start_time: str
    end_time: str
    is_available: bool


class AvailabilityCreate(ApiModel):
    user_id: int | None = None
    day_of_week: int = Field(..., ge=0, le=6)
    start_time: str = Field(..., pattern=TIME_PATTERN)
    end_time: str = Field(..., pattern=TIME_PATTERN)
    is_available: bool = True
