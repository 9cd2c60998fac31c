import pytest

from conftest import add_user, caller_for
from shiftboard.errors import NotFoundError, ValidationError
from shiftboard.models import Notification
from shiftboard.schemas.message import MessageCreate
from shiftboard.services import messaging


def test_broadcast_notifies_everyone_else(db, org_setup):
    owner = org_setup["owner"]

    message = messaging.send_message(
        db,
        caller_for(owner),
        MessageCreate(subject="Inventory", body="Friday after close", is_broadcast=True),
    )

    assert message.is_broadcast is True
    assert message.recipient_id is None
    notes = db.query(Notification).all()
    assert len(notes) == 3
    assert {n.type for n in notes} == {"announcement"}
    assert owner.id not in {n.user_id for n in notes}
    assert org_setup["outsider"].id not in {n.user_id for n in notes}


def test_broadcast_in_five_person_org_creates_four_announcements(db, org_setup):
    add_user(db, org_setup["org"], "fifth@acme.com")

    messaging.send_message(
        db,
        caller_for(org_setup["manager"]),
        MessageCreate(subject="Party", body="Saturday", is_broadcast=True),
    )

    assert db.query(Notification).filter(Notification.type == "announcement").count() == 4


def test_inactive_users_are_not_notified(db, org_setup):
    add_user(db, org_setup["org"], "gone@acme.com", is_active=False)

    messaging.send_message(db, caller_for(org_setup["owner"]), MessageCreate(subject="Hi", body="All"))

    assert db.query(Notification).count() == 3


def test_direct_message_notifies_recipient(db, org_setup):
    employee = org_setup["employee"]

    message = messaging.send_message(
        db,
        caller_for(org_setup["manager"]),
        MessageCreate(recipient_id=employee.id, subject="Schedule", body="Can you cover Tuesday?"),
    )

    assert message.is_broadcast is False
    [note] = db.query(Notification).all()
    assert note.user_id == employee.id
    assert note.type == "direct_message"


def test_recipient_must_belong_to_the_org(db, org_setup):
    with pytest.raises(NotFoundError):
        messaging.send_message(
            db,
            caller_for(org_setup["manager"]),
            MessageCreate(recipient_id=org_setup["outsider"].id, subject="Hi", body="There"),
        )


def test_broadcast_with_recipient_is_rejected(db, org_setup):
    with pytest.raises(ValidationError):
        messaging.send_message(
            db,
            caller_for(org_setup["manager"]),
            MessageCreate(recipient_id=org_setup["employee"].id, subject="Hi", body="There", is_broadcast=True),
        )


def test_message_visibility_and_read_state(db, org_setup):
    manager = caller_for(org_setup["manager"])
    employee = caller_for(org_setup["employee"])
    coworker = caller_for(org_setup["coworker"])
    direct = messaging.send_message(
        db, manager, MessageCreate(recipient_id=employee.id, subject="Private", body="Just you")
    )
    messaging.send_message(db, manager, MessageCreate(subject="Public", body="Everyone", is_broadcast=True))

    assert {m.subject for m in messaging.list_messages(db, employee)} == {"Private", "Public"}
    assert {m.subject for m in messaging.list_messages(db, coworker)} == {"Public"}
    assert messaging.list_messages(db, caller_for(org_setup["outsider"])) == []

    with pytest.raises(NotFoundError):
        messaging.mark_message_read(db, coworker, direct.id)
    assert messaging.mark_message_read(db, employee, direct.id).is_read is True


def test_blank_subject_is_rejected_over_http(acme):
    response = acme["employee"].post("/api/messages", json={"subject": "   ", "body": "Hello"})

    assert response.status_code == 400
    assert response.json()["message"].startswith("subject")


def test_broadcast_over_http(acme):
    response = acme["owner"].post(
        "/api/messages",
        json={"subject": "Welcome", "body": "Glad you're here", "isBroadcast": True},
    )
    assert response.status_code == 201

    for role in ("manager", "employee", "coworker"):
        notes = acme[role].get("/api/notifications").json()
        assert [n["type"] for n in notes] == ["announcement"]
    assert acme["owner"].get("/api/notifications").json() == []


def test_broadcast_read_state_is_per_recipient(db, org_setup):
    employee = caller_for(org_setup["employee"])
    coworker = caller_for(org_setup["coworker"])
    broadcast = messaging.send_message(
        db, caller_for(org_setup["owner"]), MessageCreate(subject="Rota", body="New rota is up", is_broadcast=True)
    )

    messaging.mark_message_read(db, employee, broadcast.id)

    db.refresh(broadcast)
    assert broadcast.is_read is False
    [employee_view] = messaging.present_messages(db, employee, [broadcast])
    [coworker_view] = messaging.present_messages(db, coworker, [broadcast])
    assert employee_view.is_read is True
    assert coworker_view.is_read is False

    employee_note = db.query(Notification).filter(Notification.user_id == employee.id).one()
    coworker_note = db.query(Notification).filter(Notification.user_id == coworker.id).one()
    assert employee_note.message_id == broadcast.id
    assert employee_note.is_read is True
    assert coworker_note.is_read is False


def test_sender_cannot_mark_own_direct_message_read(db, org_setup):
    manager = caller_for(org_setup["manager"])
    direct = messaging.send_message(
        db, manager, MessageCreate(recipient_id=org_setup["employee"].id, subject="Hi", body="There")
    )

    with pytest.raises(NotFoundError):
        messaging.mark_message_read(db, manager, direct.id)


def test_broadcast_read_state_over_http(acme):
    message_id = acme["owner"].post(
        "/api/messages",
        json={"subject": "Closing early", "body": "Doors shut at 6pm", "isBroadcast": True},
    ).json()["id"]

    marked = acme["employee"].patch(f"/api/messages/{message_id}", json={"isRead": True})
    assert marked.status_code == 200
    assert marked.json()["isRead"] is True

    assert acme["employee"].get("/api/messages").json()[0]["isRead"] is True
    assert acme["coworker"].get("/api/messages").json()[0]["isRead"] is False
    assert acme["employee"].get("/api/notifications", params={"unreadOnly": "true"}).json() == []
    assert len(acme["coworker"].get("/api/notifications", params={"unreadOnly": "true"}).json()) == 1
