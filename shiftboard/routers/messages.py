from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas.message import MessageCreate, MessageRead, MessageUpdate
from ..security import CallerContext, get_caller
from ..services import messaging

router = APIRouter(prefix="/api/messages", tags=["messages"])


@router.get("", response_model=list[MessageRead])
async def list_messages(caller: CallerContext = Depends(get_caller), db: Session = Depends(get_db)):
    return messaging.present_messages(db, caller, messaging.list_messages(db, caller))


@router.post("", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
async def send_message(
    payload: MessageCreate,
    caller: CallerContext = Depends(get_caller),
    db: Session = Depends(get_db),
):
    message = messaging.send_message(db, caller, payload)
    return messaging.present_messages(db, caller, [message])[0]


@router.patch("/{message_id}", response_model=MessageRead)
async def update_message(
    message_id: int,
    payload: MessageUpdate,
    caller: CallerContext = Depends(get_caller),
    db: Session = Depends(get_db),
):
    message = messaging.mark_message_read(db, caller, message_id, payload.is_read)
    return messaging.present_messages(db, caller, [message])[0]
