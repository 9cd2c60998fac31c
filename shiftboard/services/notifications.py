"""Notification fan-out.

Notifications are derived records: every one of them is produced here as a
side effect of another state transition. Delivery is best-effort. Each draft
is committed on its own after the originating change has been committed, so a
failure part-way through a fan-out leaves the earlier notifications in place
and never touches the originating change.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import NotFoundError
from ..models import Message, Notification, Shift, ShiftSwapRequest, TimeOffRequest, User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationDraft:
    org_id: int
    user_id: int
    type: str
    title: str
    message: str
    message_id: int | None = None


def fan_out(db: Session, drafts: Iterable[NotificationDraft]) -> list[Notification]:
    created: list[Notification] = []
    for draft in drafts:
        notification = Notification(
            org_id=draft.org_id,
            user_id=draft.user_id,
            type=draft.type,
            title=draft.title,
            message=draft.message,
            message_id=draft.message_id,
            is_read=False,
        )
        try:
            db.add(notification)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Notification %s for user %s could not be stored", draft.type, draft.user_id)
            continue
        created.append(notification)
    logger.debug("Fan-out stored %s notification(s)", len(created))
    return created


def _date_range_label(request: TimeOffRequest) -> str:
    if request.start_date == request.end_date:
        return request.start_date.isoformat()
    return f"{request.start_date.isoformat()} to {request.end_date.isoformat()}"


def _shift_label(shift: Shift) -> str:
    return shift.start_time.strftime("%a %b %d, %H:%M") + " - " + shift.end_time.strftime("%H:%M")


def time_off_reviewed(request: TimeOffRequest) -> list[NotificationDraft]:
    approved = request.status == "approved"
    verb = "approved" if approved else "denied"
    return [
        NotificationDraft(
            org_id=request.org_id,
            user_id=request.user_id,
            type="time_off_approved" if approved else "time_off_denied",
            title=f"Time off {verb}",
            message=f"Your {request.type} request for {_date_range_label(request)} was {verb}.",
        )
    ]


def message_sent(db: Session, message: Message, sender: User) -> list[NotificationDraft]:
    if message.is_broadcast:
        recipients = (
            db.query(User.id)
            .filter(
                User.org_id == message.org_id,
                User.is_active.is_(True),
                User.id != message.sender_id,
            )
            .order_by(User.id.asc())
            .all()
        )
        return [
            NotificationDraft(
                org_id=message.org_id,
                user_id=row.id,
                type="announcement",
                title=message.subject,
                message=f"{sender.full_name}: {message.body}",
                message_id=message.id,
            )
            for row in recipients
        ]
    return [
        NotificationDraft(
            org_id=message.org_id,
            user_id=message.recipient_id,
            type="direct_message",
            title=f"New message from {sender.full_name}",
            message=message.subject,
            message_id=message.id,
        )
    ]


def swap_requested(swap: ShiftSwapRequest, shift: Shift, requester: User) -> list[NotificationDraft]:
    return [
        NotificationDraft(
            org_id=swap.org_id,
            user_id=swap.target_user_id,
            type="shift_swap_requested",
            title="Shift swap requested",
            message=f"{requester.full_name} asked you to take their shift on {_shift_label(shift)}.",
        )
    ]


def swap_reviewed(swap: ShiftSwapRequest, shift: Shift) -> list[NotificationDraft]:
    approved = swap.status == "approved"
    drafts = [
        NotificationDraft(
            org_id=swap.org_id,
            user_id=swap.requester_id,
            type="shift_swap_approved" if approved else "shift_swap_denied",
            title="Shift swap approved" if approved else "Shift swap denied",
            message=f"Your swap request for {_shift_label(shift)} was {'approved' if approved else 'denied'}.",
        )
    ]
    if approved:
        drafts.extend(shift_assigned(shift))
    return drafts


def shift_assigned(shift: Shift) -> list[NotificationDraft]:
    if shift.user_id is None:
        return []
    return [
        NotificationDraft(
            org_id=shift.org_id,
            user_id=shift.user_id,
            type="shift_assigned",
            title="New shift assigned",
            message=f"You have been assigned to a shift on {_shift_label(shift)}.",
        )
    ]


def shift_updated(shift: Shift, previous_user_id: int | None, previous_status: str) -> list[NotificationDraft]:
    if shift.user_id is None:
        return []
    if shift.user_id != previous_user_id:
        return shift_assigned(shift)
    if shift.status == "published" and previous_status != "published":
        return [
            NotificationDraft(
                org_id=shift.org_id,
                user_id=shift.user_id,
                type="schedule_published",
                title="Schedule published",
                message=f"Your shift on {_shift_label(shift)} has been published.",
            )
        ]
    return [
        NotificationDraft(
            org_id=shift.org_id,
            user_id=shift.user_id,
            type="shift_changed",
            title="Shift updated",
            message=f"Your shift on {_shift_label(shift)} was changed.",
        )
    ]


def list_notifications(db: Session, user_id: int, *, unread_only: bool = False) -> Sequence[Notification]:
    query = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        query = query.filter(Notification.is_read.is_(False))
    return query.order_by(Notification.created_at.desc(), Notification.id.desc()).all()


def mark_read(db: Session, notification_id: int, user_id: int, is_read: bool = True) -> Notification:
    notification = (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.user_id == user_id)
        .one_or_none()
    )
    if not notification:
        raise NotFoundError("Notification not found")
    if notification.is_read != is_read:
        notification.is_read = is_read
        db.commit()
    return notification


def mark_all_read(db: Session, user_id: int) -> int:
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
        .update({Notification.is_read: True}, synchronize_session=False)
    )
    db.commit()
    return updated
