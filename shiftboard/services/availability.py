from __future__ import annotations

from typing import Sequence

from sqlalchemy.orm import Session

from ..errors import AuthorizationError, NotFoundError, ValidationError
from ..models import Availability
from ..schemas.availability import AvailabilityCreate
from ..security import CallerContext
from .tenancy import get_org_user, get_scoped


def _resolve_subject(db: Session, caller: CallerContext, user_id: int | None) -> int:
    if user_id is None or user_id == caller.id:
        return caller.id
    if not caller.is_privileged:
        raise AuthorizationError("You can only manage your own availability.")
    return get_org_user(db, user_id, caller.org_id).id


def list_availability(db: Session, caller: CallerContext, user_id: int | None = None) -> Sequence[Availability]:
    subject_id = _resolve_subject(db, caller, user_id)
    return (
        db.query(Availability)
        .filter(Availability.org_id == caller.org_id, Availability.user_id == subject_id)
        .order_by(Availability.day_of_week.asc(), Availability.start_time.asc())
        .all()
    )


def add_availability(db: Session, caller: CallerContext, payload: AvailabilityCreate) -> Availability:
    subject_id = _resolve_subject(db, caller, payload.user_id)
    # Zero-padded HH:MM strings compare chronologically.
    if payload.end_time <= payload.start_time:
        raise ValidationError("The end time must be after the start time.")
    window = Availability(
        org_id=caller.org_id,
        user_id=subject_id,
        day_of_week=payload.day_of_week,
        start_time=payload.start_time,
        end_time=payload.end_time,
        is_available=payload.is_available,
    )
    db.add(window)
    db.commit()
    return window


def remove_availability(db: Session, caller: CallerContext, availability_id: int) -> None:
    window = get_scoped(db, Availability, availability_id, caller.org_id, label="Availability")
    if window.user_id != caller.id and not caller.is_privileged:
        raise NotFoundError("Availability not found")
    db.delete(window)
    db.commit()
