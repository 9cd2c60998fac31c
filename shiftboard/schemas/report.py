from __future__ import annotations

from decimal import Decimal

from pydantic import Field

from .base import ApiModel
from .shift import ShiftRead
from .time_off import TimeOffRead
from .user import UserRead


class UserHours(ApiModel):
    user_id: int
    full_name: str
    position: str | None = None
    shift_count: int
    total_hours: float
    labor_cost: Decimal


class ReportSummary(ApiModel):
    total_hours: float = 0.0
    total_labor_cost: Decimal = Decimal("0.00")
    active_employees: int = 0
    approved_time_off: int = 0
    time_off_by_type: dict[str, int] = Field(default_factory=dict)
    pending_time_off: int = 0
    pending_swaps: int = 0
    hours_per_user: list[UserHours] = Field(default_factory=list)


class OrgReport(ApiModel):
    users: list[UserRead]
    shifts: list[ShiftRead]
    time_off: list[TimeOffRead]
    summary: ReportSummary
