from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator

from .base import ApiModel, TenantRecord


class MessageRead(TenantRecord):
    sender_id: int
    recipient_id: int | None = None
    subject: str
    body: str
    is_read: bool
    is_broadcast: bool
    created_at: datetime | None = None


class MessageCreate(ApiModel):
    recipient_id: int | None = None
    subject: str = Field(..., min_length=1, max_length=200)
    body: str = Field(..., min_length=1)
    is_broadcast: bool = False

    @field_validator("subject", "body")
    @classmethod
    def strip_content(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Message content is required")
        return cleaned


class MessageUpdate(ApiModel):
    is_read: bool = True
