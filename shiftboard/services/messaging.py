from __future__ import annotations

from typing import Sequence

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..errors import NotFoundError, ValidationError
from ..models import Message, Notification, User
from ..schemas.message import MessageCreate, MessageRead
from ..security import CallerContext
from . import notifications
from .tenancy import get_org_user, get_scoped


def list_messages(db: Session, caller: CallerContext) -> Sequence[Message]:
    return (
        db.query(Message)
        .filter(
            Message.org_id == caller.org_id,
            or_(
                Message.is_broadcast.is_(True),
                Message.sender_id == caller.id,
                Message.recipient_id == caller.id,
            ),
        )
        .order_by(Message.created_at.desc(), Message.id.desc())
        .all()
    )


def send_message(db: Session, caller: CallerContext, payload: MessageCreate) -> Message:
    is_broadcast = payload.is_broadcast or payload.recipient_id is None
    if payload.is_broadcast and payload.recipient_id is not None:
        raise ValidationError("A broadcast message cannot have a recipient.")
    if not is_broadcast:
        get_org_user(db, payload.recipient_id, caller.org_id, active_only=True)

    message = Message(
        org_id=caller.org_id,
        sender_id=caller.id,
        recipient_id=None if is_broadcast else payload.recipient_id,
        subject=payload.subject,
        body=payload.body,
        is_broadcast=is_broadcast,
        is_read=False,
    )
    db.add(message)
    db.commit()

    sender = db.get(User, caller.id)
    notifications.fan_out(db, notifications.message_sent(db, message, sender))
    return message


def _is_received_broadcast(message: Message, caller: CallerContext) -> bool:
    return message.is_broadcast and message.sender_id != caller.id


def mark_message_read(db: Session, caller: CallerContext, message_id: int, is_read: bool = True) -> Message:
    """Mark a received message read.

    A broadcast has many readers, so its read state is kept per recipient on
    their announcement notification rather than on the shared message row.
    """
    message = get_scoped(db, Message, message_id, caller.org_id, label="Message")
    if _is_received_broadcast(message, caller):
        (
            db.query(Notification)
            .filter(Notification.user_id == caller.id, Notification.message_id == message.id)
            .update({Notification.is_read: is_read})
        )
        db.commit()
        return message
    if message.recipient_id != caller.id:
        raise NotFoundError("Message not found")
    if message.is_read != is_read:
        message.is_read = is_read
        db.commit()
    return message


def present_messages(db: Session, caller: CallerContext, messages: Sequence[Message]) -> list[MessageRead]:
    """Serialize messages with the caller's own read state for broadcasts."""
    broadcast_ids = [m.id for m in messages if _is_received_broadcast(m, caller)]
    read_ids: set[int] = set()
    if broadcast_ids:
        rows = (
            db.query(Notification.message_id)
            .filter(
                Notification.user_id == caller.id,
                Notification.message_id.in_(broadcast_ids),
                Notification.is_read.is_(True),
            )
            .all()
        )
        read_ids = {row.message_id for row in rows}

    views = []
    for message in messages:
        view = MessageRead.model_validate(message)
        if message.id in broadcast_ids:
            view = view.model_copy(update={"is_read": message.id in read_ids})
        views.append(view)
    return views
