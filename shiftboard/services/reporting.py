from __future__ import annotations

from collections import Counter
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.orm import Session

from ..constants import TIME_OFF_TYPES
from ..models import Shift, ShiftSwapRequest, TimeOffRequest, User
from ..schemas.report import OrgReport, ReportSummary, UserHours
from ..schemas.shift import ShiftRead
from ..schemas.time_off import TimeOffRead
from ..schemas.user import UserRead

BILLABLE_SHIFT_STATUSES = ("published", "completed")
CENTS = Decimal("0.01")


def build_org_report(db: Session, org_id: int) -> OrgReport:
    users = db.query(User).filter(User.org_id == org_id).order_by(User.first_name.asc(), User.id.asc()).all()
    shifts = db.query(Shift).filter(Shift.org_id == org_id).order_by(Shift.start_time.asc()).all()
    time_off = (
        db.query(TimeOffRequest)
        .filter(TimeOffRequest.org_id == org_id)
        .order_by(TimeOffRequest.created_at.desc(), TimeOffRequest.id.desc())
        .all()
    )
    pending_swaps = (
        db.query(ShiftSwapRequest)
        .filter(ShiftSwapRequest.org_id == org_id, ShiftSwapRequest.status == "pending")
        .count()
    )
    return OrgReport(
        users=[UserRead.model_validate(user) for user in users],
        shifts=[ShiftRead.model_validate(shift) for shift in shifts],
        time_off=[TimeOffRead.model_validate(request) for request in time_off],
        summary=summarize(users, shifts, time_off, pending_swaps),
    )


def summarize(
    users: list[User],
    shifts: list[Shift],
    time_off: list[TimeOffRequest],
    pending_swaps: int = 0,
) -> ReportSummary:
    """Hours and labor cost of published/completed shifts per active user."""
    rows: list[UserHours] = []
    for user in users:
        if not user.is_active:
            continue
        worked = [s for s in shifts if s.user_id == user.id and s.status in BILLABLE_SHIFT_STATUSES]
        hours = sum(shift.duration_hours for shift in worked)
        rate = Decimal(user.hourly_rate) if user.hourly_rate is not None else Decimal("0")
        cost = (Decimal(str(round(hours, 4))) * rate).quantize(CENTS, rounding=ROUND_HALF_UP)
        rows.append(
            UserHours(
                user_id=user.id,
                full_name=user.full_name,
                position=user.position,
                shift_count=len(worked),
                total_hours=round(hours, 2),
                labor_cost=cost,
            )
        )
    rows.sort(key=lambda row: row.total_hours, reverse=True)

    approved = Counter(request.type for request in time_off if request.status == "approved")
    return ReportSummary(
        total_hours=round(sum(row.total_hours for row in rows), 2),
        total_labor_cost=sum((row.labor_cost for row in rows), Decimal("0.00")),
        active_employees=len(rows),
        approved_time_off=sum(approved.values()),
        time_off_by_type={kind: approved.get(kind, 0) for kind in TIME_OFF_TYPES},
        pending_time_off=sum(1 for request in time_off if request.status == "pending"),
        pending_swaps=pending_swaps,
        hours_per_user=rows,
    )
