from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas.notification import NotificationRead, NotificationUpdate
from ..security import CallerContext, get_caller
from ..services import notifications as notification_service

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationRead])
async def list_notifications(
    unread_only: bool = Query(default=False, alias="unreadOnly"),
    caller: CallerContext = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return notification_service.list_notifications(db, caller.id, unread_only=unread_only)


@router.post("/mark-all-read")
async def mark_all_read(caller: CallerContext = Depends(get_caller), db: Session = Depends(get_db)):
    updated = notification_service.mark_all_read(db, caller.id)
    return JSONResponse({"message": "All marked as read", "updated": updated})


@router.patch("/{notification_id}", response_model=NotificationRead)
async def update_notification(
    notification_id: int,
    payload: NotificationUpdate,
    caller: CallerContext = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return notification_service.mark_read(db, notification_id, caller.id, payload.is_read)
