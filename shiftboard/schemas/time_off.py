from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from .base import ApiModel, TenantRecord

TimeOffType = Literal["vacation", "sick", "personal", "unpaid"]
ReviewDecision = Literal["approved", "denied"]


class TimeOffRead(TenantRecord):
    user_id: int
    start_date: date
    end_date: date
    type: str
    status: str
    reason: str | None = None
    reviewed_by: int | None = None
    reviewed_at: datetime | None = None
    created_at: datetime | None = None


class TimeOffCreate(ApiModel):
    user_id: int | None = None
    start_date: date
    end_date: date
    type: TimeOffType
    reason: str | None = None


class ReviewRequest(ApiModel):
    status: ReviewDecision
