from __future__ import annotations

from datetime import datetime

from .base import ApiModel, TenantRecord


class NotificationRead(TenantRecord):
    user_id: int
    type: str
    title: str
    message: str
    message_id: int | None = None
    is_read: bool
    created_at: datetime | None = None


class NotificationUpdate(ApiModel):
    is_read: bool = True
