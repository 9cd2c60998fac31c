from datetime import date, datetime
from decimal import Decimal

from shiftboard.models import Shift, TimeOffRequest
from shiftboard.services.reporting import build_org_report


def test_summary_counts_billable_shifts(db, org_setup):
    employee = org_setup["employee"]
    db.add_all(
        [
            Shift(
                org_id=org_setup["org"].id,
                location_id=org_setup["location"].id,
                user_id=employee.id,
                start_time=datetime(2024, 3, 5, 9, 0),
                end_time=datetime(2024, 3, 5, 13, 30),
                status="completed",
            ),
            Shift(
                org_id=org_setup["org"].id,
                location_id=org_setup["location"].id,
                user_id=employee.id,
                start_time=datetime(2024, 3, 6, 9, 0),
                end_time=datetime(2024, 3, 6, 17, 0),
                status="cancelled",
            ),
            TimeOffRequest(
                org_id=org_setup["org"].id,
                user_id=employee.id,
                start_date=date(2024, 4, 1),
                end_date=date(2024, 4, 2),
                type="vacation",
                status="approved",
            ),
            TimeOffRequest(
                org_id=org_setup["org"].id,
                user_id=org_setup["coworker"].id,
                start_date=date(2024, 4, 1),
                end_date=date(2024, 4, 1),
                type="sick",
                status="pending",
            ),
        ]
    )
    db.commit()

    report = build_org_report(db, org_setup["org"].id)
    summary = report.summary

    assert summary.total_hours == 12.5
    assert summary.total_labor_cost == Decimal("250.00")
    assert summary.active_employees == 4
    assert summary.approved_time_off == 1
    assert summary.time_off_by_type == {"vacation": 1, "sick": 0, "personal": 0, "unpaid": 0}
    assert summary.pending_time_off == 1
    top = summary.hours_per_user[0]
    assert top.user_id == employee.id
    assert top.shift_count == 2
    assert len(report.shifts) == 3
    assert {u.id for u in report.users}.isdisjoint({org_setup["outsider"].id})


def test_reports_are_owner_only(acme):
    assert acme["manager"].get("/api/reports").status_code == 403
    assert acme["employee"].get("/api/reports").status_code == 403
    assert acme["manager"].get("/api/reports/export").status_code == 403

    response = acme["owner"].get("/api/reports")
    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"users", "shifts", "timeOff", "summary"}
    assert body["summary"]["activeEmployees"] == 4


def test_csv_export(acme):
    owner = acme["owner"]
    owner.patch(f"/api/users/{acme['employee_user']['id']}", json={"hourlyRate": "15"})
    owner.post(
        "/api/shifts",
        json={
            "locationId": acme["location_id"],
            "userId": acme["employee_user"]["id"],
            "startTime": "2024-03-05T09:00:00",
            "endTime": "2024-03-05T17:00:00",
            "status": "published",
        },
    )

    response = owner.get("/api/reports/export")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "attachment; filename=labor_report_" in response.headers["content-disposition"]
    lines = response.text.strip().splitlines()
    assert lines[0] == "Employee,Position,Shifts,Hours,Labor Cost"
    assert lines[1] == "Eve Member,,1,8.0,120.00"
    assert lines[-1] == "Total,,,8.0,120.00"
