import pytest

from conftest import caller_for
from shiftboard.errors import AuthorizationError, NotFoundError, ValidationError
from shiftboard.schemas.availability import AvailabilityCreate
from shiftboard.services import availability as availability_service


def _window(**overrides) -> AvailabilityCreate:
    data = {"day_of_week": 1, "start_time": "09:00", "end_time": "17:00"}
    data.update(overrides)
    return AvailabilityCreate(**data)


def test_employee_manages_own_availability(db, org_setup):
    employee = caller_for(org_setup["employee"])

    window = availability_service.add_availability(db, employee, _window())
    availability_service.add_availability(db, employee, _window(day_of_week=0, is_available=False))

    listed = availability_service.list_availability(db, employee)
    assert [w.day_of_week for w in listed] == [0, 1]

    availability_service.remove_availability(db, employee, window.id)
    assert len(availability_service.list_availability(db, employee)) == 1


def test_window_must_end_after_it_starts(db, org_setup):
    with pytest.raises(ValidationError):
        availability_service.add_availability(
            db, caller_for(org_setup["employee"]), _window(start_time="17:00", end_time="09:00")
        )


def test_only_privileged_roles_act_for_others(db, org_setup):
    employee = org_setup["employee"]
    coworker = caller_for(org_setup["coworker"])

    with pytest.raises(AuthorizationError):
        availability_service.add_availability(db, coworker, _window(user_id=employee.id))

    window = availability_service.add_availability(db, caller_for(org_setup["manager"]), _window(user_id=employee.id))
    assert window.user_id == employee.id

    with pytest.raises(NotFoundError):
        availability_service.remove_availability(db, coworker, window.id)
    with pytest.raises(NotFoundError):
        availability_service.list_availability(db, caller_for(org_setup["manager"]), org_setup["outsider"].id)


def test_time_format_is_validated(acme):
    response = acme["employee"].post(
        "/api/availability",
        json={"dayOfWeek": 2, "startTime": "9am", "endTime": "17:00"},
    )
    assert response.status_code == 400

    response = acme["employee"].post(
        "/api/availability",
        json={"dayOfWeek": 7, "startTime": "09:00", "endTime": "17:00"},
    )
    assert response.status_code == 400


def test_availability_over_http(acme):
    employee = acme["employee"]
    created = employee.post("/api/availability", json={"dayOfWeek": 3, "startTime": "08:00", "endTime": "12:00"})
    assert created.status_code == 201

    seen_by_manager = acme["manager"].get("/api/availability", params={"userId": acme["employee_user"]["id"]})
    assert [w["id"] for w in seen_by_manager.json()] == [created.json()["id"]]

    assert employee.delete(f"/api/availability/{created.json()['id']}").status_code == 200
    assert employee.get("/api/availability").json() == []
