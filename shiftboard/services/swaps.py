from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..errors import AuthorizationError, ValidationError
from ..models import Shift, ShiftSwapRequest, User
from ..permissions import REVIEW_SWAPS, VIEW_ALL_REQUESTS
from ..schemas.swap import SwapCreate
from ..security import CallerContext
from . import notifications
from .tenancy import get_org_user, get_scoped

logger = logging.getLogger(__name__)

SWAPPABLE_SHIFT_STATUSES = frozenset({"scheduled", "published"})


def _check_swappable(shift: Shift) -> None:
    if shift.status not in SWAPPABLE_SHIFT_STATUSES:
        raise ValidationError(f"A {shift.status} shift cannot be swapped.")


def list_swaps(db: Session, caller: CallerContext) -> Sequence[ShiftSwapRequest]:
    query = db.query(ShiftSwapRequest).filter(ShiftSwapRequest.org_id == caller.org_id)
    if not caller.can(VIEW_ALL_REQUESTS):
        query = query.filter(
            or_(
                ShiftSwapRequest.requester_id == caller.id,
                ShiftSwapRequest.target_user_id == caller.id,
            )
        )
    return query.order_by(ShiftSwapRequest.created_at.desc(), ShiftSwapRequest.id.desc()).all()


def request_swap(db: Session, caller: CallerContext, payload: SwapCreate) -> ShiftSwapRequest:
    shift = get_scoped(db, Shift, payload.shift_id, caller.org_id, label="Shift")
    if shift.user_id != caller.id:
        raise AuthorizationError("You can only request swaps for shifts assigned to you.")
    _check_swappable(shift)
    if payload.target_user_id == caller.id:
        raise ValidationError("Choose a different employee to take this shift.")
    get_org_user(db, payload.target_user_id, caller.org_id, active_only=True)

    already_pending = (
        db.query(ShiftSwapRequest.id)
        .filter(ShiftSwapRequest.shift_id == shift.id, ShiftSwapRequest.status == "pending")
        .first()
    )
    if already_pending:
        raise ValidationError("A swap for this shift is already pending.")

    swap = ShiftSwapRequest(
        org_id=caller.org_id,
        shift_id=shift.id,
        requester_id=caller.id,
        target_user_id=payload.target_user_id,
        reason=payload.reason,
        status="pending",
    )
    db.add(swap)
    db.commit()

    requester = db.get(User, caller.id)
    notifications.fan_out(db, notifications.swap_requested(swap, shift, requester))
    return swap


def review_swap(db: Session, caller: CallerContext, swap_id: int, decision: str) -> ShiftSwapRequest:
    """Approve or deny a pending swap.

    The status change and, on approval, the reassignment of the shift are
    committed together. Both rows are locked first so two reviewers racing on
    the same swap cannot both apply it.
    """
    if not caller.can(REVIEW_SWAPS):
        raise AuthorizationError()
    try:
        swap = get_scoped(db, ShiftSwapRequest, swap_id, caller.org_id, label="Swap request", for_update=True)
        if swap.status != "pending":
            raise ValidationError(f"This swap request has already been {swap.status}.")
        shift = get_scoped(db, Shift, swap.shift_id, caller.org_id, label="Shift", for_update=True)

        if decision == "approved":
            _check_swappable(shift)
            if shift.user_id != swap.requester_id:
                raise ValidationError("The shift is no longer assigned to the requester.")
            shift.user_id = swap.target_user_id

        swap.status = decision
        swap.reviewed_by = caller.id
        swap.reviewed_at = datetime.now(timezone.utc).replace(tzinfo=None)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Swap request %s %s by user %s", swap.id, decision, caller.id)

    notifications.fan_out(db, notifications.swap_reviewed(swap, shift))
    return swap
