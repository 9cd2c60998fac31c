from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy.orm import Session

from ..errors import AuthorizationError, ValidationError
from ..models import TimeOffRequest
from ..permissions import REVIEW_TIME_OFF, SUBMIT_FOR_OTHERS, VIEW_ALL_REQUESTS
from ..schemas.time_off import TimeOffCreate
from ..security import CallerContext
from . import notifications
from .tenancy import get_org_user, get_scoped

logger = logging.getLogger(__name__)


def list_time_off(db: Session, caller: CallerContext) -> Sequence[TimeOffRequest]:
    query = db.query(TimeOffRequest).filter(TimeOffRequest.org_id == caller.org_id)
    if not caller.can(VIEW_ALL_REQUESTS):
        query = query.filter(TimeOffRequest.user_id == caller.id)
    return query.order_by(TimeOffRequest.created_at.desc(), TimeOffRequest.id.desc()).all()


def submit_time_off(db: Session, caller: CallerContext, payload: TimeOffCreate) -> TimeOffRequest:
    user_id = payload.user_id or caller.id
    if user_id != caller.id:
        if not caller.can(SUBMIT_FOR_OTHERS):
            raise AuthorizationError("You can only request time off for yourself.")
        get_org_user(db, user_id, caller.org_id)
    if payload.end_date < payload.start_date:
        raise ValidationError("The end date must be on or after the start date.")

    request = TimeOffRequest(
        org_id=caller.org_id,
        user_id=user_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        type=payload.type,
        reason=payload.reason,
        status="pending",
    )
    db.add(request)
    db.commit()
    return request


def review_time_off(db: Session, caller: CallerContext, request_id: int, decision: str) -> TimeOffRequest:
    if not caller.can(REVIEW_TIME_OFF):
        raise AuthorizationError()
    request = get_scoped(db, TimeOffRequest, request_id, caller.org_id, label="Request", for_update=True)
    if request.status != "pending":
        raise ValidationError(f"This request has already been {request.status}.")

    request.status = decision
    request.reviewed_by = caller.id
    request.reviewed_at = datetime.now(timezone.utc).replace(tzinfo=None)
    db.commit()
    logger.info("Time-off request %s %s by user %s", request.id, decision, caller.id)

    notifications.fan_out(db, notifications.time_off_reviewed(request))
    return request
