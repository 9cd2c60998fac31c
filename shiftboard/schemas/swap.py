from __future__ import annotations

from datetime import datetime

from .base import ApiModel, TenantRecord


class SwapRead(TenantRecord):
    shift_id: int
    requester_id: int
    target_user_id: int
    status: str
    reason: str | None = None
    reviewed_by: int | None = None
    reviewed_at: datetime | None = None
    created_at: datetime | None = None


class SwapCreate(ApiModel):
    shift_id: int
    target_user_id: int
    reason: str | None = None
