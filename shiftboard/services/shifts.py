from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from ..errors import ValidationError
from ..models import Location, Shift
from ..permissions import INITIAL_SHIFT_STATUSES, can_transition_shift
from ..schemas.shift import ShiftCreate, ShiftUpdate
from ..security import CallerContext
from . import notifications
from .tenancy import get_org_user, get_scoped

logger = logging.getLogger(__name__)

END_AFTER_START_MESSAGE = "The end time must be after the start time."


def _check_window(start_time: datetime, end_time: datetime) -> None:
    if end_time <= start_time:
        raise ValidationError(END_AFTER_START_MESSAGE)


def _check_references(db: Session, caller: CallerContext, location_id: int | None, user_id: int | None) -> None:
    if location_id is not None:
        get_scoped(db, Location, location_id, caller.org_id, label="Location")
    if user_id is not None:
        get_org_user(db, user_id, caller.org_id)


def list_shifts(
    db: Session,
    org_id: int,
    *,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    location_id: Optional[int] = None,
    user_id: Optional[int] = None,
) -> Sequence[Shift]:
    query = db.query(Shift).filter(Shift.org_id == org_id)
    if start is not None:
        query = query.filter(Shift.end_time > start)
    if end is not None:
        query = query.filter(Shift.start_time < end)
    if location_id is not None:
        query = query.filter(Shift.location_id == location_id)
    if user_id is not None:
        query = query.filter(Shift.user_id == user_id)
    return query.order_by(Shift.start_time.asc(), Shift.id.asc()).all()


def get_shift(db: Session, caller: CallerContext, shift_id: int) -> Shift:
    return get_scoped(db, Shift, shift_id, caller.org_id, label="Shift")


def create_shift(db: Session, caller: CallerContext, payload: ShiftCreate) -> Shift:
    _check_window(payload.start_time, payload.end_time)
    if payload.status not in INITIAL_SHIFT_STATUSES:
        raise ValidationError("New shifts must be scheduled or published.")
    _check_references(db, caller, payload.location_id, payload.user_id)

    shift = Shift(
        org_id=caller.org_id,
        location_id=payload.location_id,
        user_id=payload.user_id,
        start_time=payload.start_time,
        end_time=payload.end_time,
        position=payload.position,
        notes=payload.notes,
        status=payload.status,
    )
    db.add(shift)
    db.commit()
    logger.info("Shift %s created in org %s by user %s", shift.id, caller.org_id, caller.id)

    notifications.fan_out(db, notifications.shift_assigned(shift))
    return shift


def update_shift(db: Session, caller: CallerContext, shift_id: int, payload: ShiftUpdate) -> Shift:
    shift = get_shift(db, caller, shift_id)
    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        return shift

    for required in ("location_id", "start_time", "end_time", "status"):
        if required in changes and changes[required] is None:
            raise ValidationError(f"{required.replace('_', ' ').capitalize()} cannot be empty.")

    start_time = changes.get("start_time", shift.start_time)
    end_time = changes.get("end_time", shift.end_time)
    _check_window(start_time, end_time)

    new_status = changes.get("status", shift.status)
    if not can_transition_shift(shift.status, new_status):
        raise ValidationError(f"A {shift.status} shift cannot be moved to {new_status}.")

    _check_references(db, caller, changes.get("location_id"), changes.get("user_id"))

    previous_user_id = shift.user_id
    previous_status = shift.status
    for field, value in changes.items():
        setattr(shift, field, value)
    db.commit()

    notifications.fan_out(db, notifications.shift_updated(shift, previous_user_id, previous_status))
    return shift


def delete_shift(db: Session, caller: CallerContext, shift_id: int) -> None:
    shift = get_shift(db, caller, shift_id)
    db.delete(shift)
    db.commit()
    logger.info("Shift %s deleted in org %s by user %s", shift_id, caller.org_id, caller.id)
