from datetime import datetime

import pytest

from conftest import caller_for
from shiftboard.errors import AuthorizationError, NotFoundError, ValidationError
from shiftboard.models import Notification, Shift
from shiftboard.schemas.shift import ShiftCreate, ShiftUpdate
from shiftboard.security import require_capability
from shiftboard.permissions import MANAGE_SHIFTS
from shiftboard.services import shifts as shift_service


def _payload(location_id, **overrides):
    data = {
        "locationId": location_id,
        "startTime": "2024-03-05T09:00:00",
        "endTime": "2024-03-05T17:00:00",
    }
    data.update(overrides)
    return data


def test_end_equal_to_start_is_rejected(db, org_setup):
    manager = caller_for(org_setup["manager"])
    payload = ShiftCreate.model_validate(
        _payload(org_setup["location"].id, startTime="2024-03-05T09:00:00", endTime="2024-03-05T09:00:00")
    )

    with pytest.raises(ValidationError) as excinfo:
        shift_service.create_shift(db, manager, payload)
    assert excinfo.value.message == "The end time must be after the start time."


def test_end_before_start_is_rejected(db, org_setup):
    manager = caller_for(org_setup["manager"])
    payload = ShiftCreate.model_validate(
        _payload(org_setup["location"].id, startTime="2024-03-05T17:00:00", endTime="2024-03-05T09:00:00")
    )

    with pytest.raises(ValidationError):
        shift_service.create_shift(db, manager, payload)
    assert db.query(Shift).count() == 2


def test_unassigned_sentinel_becomes_null(db, org_setup):
    manager = caller_for(org_setup["manager"])
    payload = ShiftCreate.model_validate(_payload(org_setup["location"].id, userId="unassigned"))

    shift = shift_service.create_shift(db, manager, payload)

    assert shift.user_id is None
    assert shift.status == "scheduled"


def test_assigning_a_shift_notifies_the_assignee(db, org_setup):
    manager = caller_for(org_setup["manager"])
    coworker = org_setup["coworker"]
    payload = ShiftCreate.model_validate(_payload(org_setup["location"].id, userId=coworker.id))

    shift_service.create_shift(db, manager, payload)

    notes = db.query(Notification).filter(Notification.user_id == coworker.id).all()
    assert [n.type for n in notes] == ["shift_assigned"]


def test_location_from_another_org_is_not_found(db, org_setup):
    manager = caller_for(org_setup["manager"])
    payload = ShiftCreate.model_validate(_payload(org_setup["other_location"].id))

    with pytest.raises(NotFoundError):
        shift_service.create_shift(db, manager, payload)


def test_update_checks_merged_times(db, org_setup):
    manager = caller_for(org_setup["manager"])
    shift = org_setup["shift"]

    with pytest.raises(ValidationError):
        shift_service.update_shift(db, manager, shift.id, ShiftUpdate(end_time=datetime(2024, 3, 4, 8, 0)))

    updated = shift_service.update_shift(db, manager, shift.id, ShiftUpdate(end_time=datetime(2024, 3, 4, 18, 0)))
    assert updated.end_time == datetime(2024, 3, 4, 18, 0)
    assert updated.start_time == datetime(2024, 3, 4, 9, 0)


def test_update_with_unassigned_clears_the_user(db, org_setup):
    manager = caller_for(org_setup["manager"])
    shift = org_setup["shift"]

    updated = shift_service.update_shift(db, manager, shift.id, ShiftUpdate.model_validate({"userId": "unassigned"}))

    assert updated.user_id is None


def test_completed_shift_cannot_be_reopened(db, org_setup):
    manager = caller_for(org_setup["manager"])
    shift = org_setup["shift"]
    shift_service.update_shift(db, manager, shift.id, ShiftUpdate(status="completed"))

    with pytest.raises(ValidationError):
        shift_service.update_shift(db, manager, shift.id, ShiftUpdate(status="scheduled"))


def test_cross_tenant_update_and_delete_are_not_found(db, org_setup):
    manager = caller_for(org_setup["manager"])
    other_shift = org_setup["other_shift"]

    with pytest.raises(NotFoundError):
        shift_service.update_shift(db, manager, other_shift.id, ShiftUpdate(notes="mine now"))
    with pytest.raises(NotFoundError):
        shift_service.delete_shift(db, manager, other_shift.id)

    db.refresh(other_shift)
    assert other_shift.notes is None


def test_employee_cannot_manage_shifts(org_setup):
    checker = require_capability(MANAGE_SHIFTS)
    with pytest.raises(AuthorizationError):
        checker(caller=caller_for(org_setup["employee"]))


def test_shift_crud_over_http(acme):
    manager = acme["manager"]
    employee = acme["employee"]
    location_id = acme["location_id"]

    created = manager.post("/api/shifts", json=_payload(location_id, userId=acme["employee_user"]["id"]))
    assert created.status_code == 201
    shift = created.json()
    assert shift["userId"] == acme["employee_user"]["id"]
    assert shift["organizationId"] == acme["owner_user"]["organizationId"]

    assert employee.post("/api/shifts", json=_payload(location_id)).status_code == 403
    assert employee.get("/api/shifts").json()[0]["id"] == shift["id"]

    patched = manager.patch(f"/api/shifts/{shift['id']}", json={"status": "published", "notes": "Bring keys"})
    assert patched.status_code == 200
    assert patched.json()["status"] == "published"

    deleted = manager.delete(f"/api/shifts/{shift['id']}")
    assert deleted.status_code == 200
    assert manager.get(f"/api/shifts/{shift['id']}").status_code == 404


def test_http_validation_errors_use_message_shape(acme):
    manager = acme["manager"]

    same_time = manager.post(
        "/api/shifts",
        json=_payload(acme["location_id"], endTime="2024-03-05T09:00:00"),
    )
    assert same_time.status_code == 400
    assert same_time.json() == {"message": "The end time must be after the start time."}

    missing_location = manager.post(
        "/api/shifts",
        json={"startTime": "2024-03-05T09:00:00", "endTime": "2024-03-05T17:00:00"},
    )
    assert missing_location.status_code == 400
    assert "locationId" in missing_location.json()["message"]

    bad_time = manager.post("/api/shifts", json=_payload(acme["location_id"], startTime="not-a-time"))
    assert bad_time.status_code == 400


def test_shift_list_filters(acme):
    manager = acme["manager"]
    location_id = acme["location_id"]
    manager.post("/api/shifts", json=_payload(location_id, userId=acme["employee_user"]["id"]))
    manager.post(
        "/api/shifts",
        json=_payload(location_id, startTime="2024-03-12T09:00:00", endTime="2024-03-12T17:00:00"),
    )

    by_user = manager.get("/api/shifts", params={"userId": acme["employee_user"]["id"]}).json()
    assert len(by_user) == 1

    in_window = manager.get(
        "/api/shifts",
        params={"start": "2024-03-10T00:00:00", "end": "2024-03-13T00:00:00"},
    ).json()
    assert [s["startTime"] for s in in_window] == ["2024-03-12T09:00:00"]
