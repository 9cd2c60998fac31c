from __future__ import annotations

import csv
import io
from datetime import date

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from ..db import get_db
from ..permissions import VIEW_REPORTS
from ..schemas.report import OrgReport
from ..security import CallerContext, require_capability
from ..services.reporting import build_org_report

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("", response_model=OrgReport)
async def org_report(
    caller: CallerContext = Depends(require_capability(VIEW_REPORTS)),
    db: Session = Depends(get_db),
):
    return build_org_report(db, caller.org_id)


@router.get("/export")
async def export_report(
    caller: CallerContext = Depends(require_capability(VIEW_REPORTS)),
    db: Session = Depends(get_db),
):
    report = build_org_report(db, caller.org_id)

    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(["Employee", "Position", "Shifts", "Hours", "Labor Cost"])
    for row in report.summary.hours_per_user:
        writer.writerow(
            [
                row.full_name,
                row.position or "",
                row.shift_count,
                row.total_hours,
                f"{row.labor_cost:.2f}",
            ]
        )
    writer.writerow(["Total", "", "", report.summary.total_hours, f"{report.summary.total_labor_cost:.2f}"])

    buffer.seek(0)
    filename = f"labor_report_{date.today().isoformat()}.csv"
    return StreamingResponse(
        iter([buffer.getvalue()]),
        media_type="text/csv",
        headers={
            "Content-Disposition": f"attachment; filename={filename}",
        },
    )
