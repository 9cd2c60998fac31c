import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RUN_MIGRATIONS_ON_STARTUP", "false")
os.environ.setdefault("SECRET_KEY", "test-secret")

from datetime import datetime

import bcrypt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shiftboard.db import get_db
from shiftboard.main import app
from shiftboard.models import Base, Location, Organization, Shift, User
from shiftboard.security import CallerContext, get_password_hash

PASSWORD = "secret1"
_real_gensalt = bcrypt.gensalt


@pytest.fixture(autouse=True)
def fast_hashing(monkeypatch):
    """Cheap bcrypt rounds; hashing cost is irrelevant to behaviour under test."""
    monkeypatch.setattr(bcrypt, "gensalt", lambda rounds=4, prefix=b"2b": _real_gensalt(rounds=4, prefix=prefix))


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    yield factory
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def make_client(session_factory):
    """Return a factory of TestClients, each with its own cookie jar."""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    clients = []

    def factory() -> TestClient:
        client = TestClient(app)
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.close()
    app.dependency_overrides.clear()


def register(client: TestClient, email: str = "a@x.com", org_name: str = "Acme", password: str = PASSWORD) -> dict:
    response = client.post(
        "/api/auth/register",
        json={
            "email": email,
            "password": password,
            "firstName": "Olive",
            "lastName": "Owner",
            "organizationName": org_name,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()["user"]


def login(client: TestClient, email: str, password: str = PASSWORD) -> dict:
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["user"]


def create_member(client: TestClient, email: str, role: str = "employee", first_name: str = "Eve", **extra) -> dict:
    response = client.post(
        "/api/users",
        json={
            "email": email,
            "password": PASSWORD,
            "firstName": first_name,
            "lastName": "Member",
            "role": role,
            **extra,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def acme(make_client):
    """Owner, manager and two employees of one organization, each logged in on its own client."""
    owner = make_client()
    owner_user = register(owner, "a@x.com", "Acme")
    manager_user = create_member(owner, "m@x.com", role="manager", first_name="Max")
    employee_user = create_member(owner, "e@x.com", first_name="Eve")
    coworker_user = create_member(owner, "c@x.com", first_name="Cal")

    manager = make_client()
    login(manager, "m@x.com")
    employee = make_client()
    login(employee, "e@x.com")
    coworker = make_client()
    login(coworker, "c@x.com")

    location_id = owner.get("/api/locations").json()[0]["id"]
    return {
        "owner": owner,
        "manager": manager,
        "employee": employee,
        "coworker": coworker,
        "owner_user": owner_user,
        "manager_user": manager_user,
        "employee_user": employee_user,
        "coworker_user": coworker_user,
        "location_id": location_id,
    }


def add_user(db, org: Organization, email: str, role: str = "employee", **extra) -> User:
    user = User(
        org_id=org.id,
        email=email,
        password_hash=get_password_hash(PASSWORD),
        first_name=extra.pop("first_name", email.split("@")[0].title()),
        last_name=extra.pop("last_name", "Test"),
        role=role,
        is_active=extra.pop("is_active", True),
        **extra,
    )
    db.add(user)
    db.commit()
    return user


def caller_for(user: User) -> CallerContext:
    return CallerContext(id=user.id, org_id=user.org_id, role=user.role)


@pytest.fixture
def org_setup(db):
    """Two organizations seeded straight through the ORM for service-level tests."""
    org = Organization(name="Acme")
    other_org = Organization(name="Globex")
    db.add_all([org, other_org])
    db.commit()

    owner = add_user(db, org, "owner@acme.com", role="owner")
    manager = add_user(db, org, "manager@acme.com", role="manager")
    employee = add_user(db, org, "employee@acme.com", hourly_rate=20)
    coworker = add_user(db, org, "coworker@acme.com")
    outsider = add_user(db, other_org, "owner@globex.com", role="owner")

    location = Location(org_id=org.id, name="Main Location", timezone="America/New_York")
    other_location = Location(org_id=other_org.id, name="Globex HQ", timezone="UTC")
    db.add_all([location, other_location])
    db.commit()

    shift = Shift(
        org_id=org.id,
        location_id=location.id,
        user_id=employee.id,
        start_time=datetime(2024, 3, 4, 9, 0),
        end_time=datetime(2024, 3, 4, 17, 0),
        status="published",
    )
    other_shift = Shift(
        org_id=other_org.id,
        location_id=other_location.id,
        user_id=outsider.id,
        start_time=datetime(2024, 3, 4, 9, 0),
        end_time=datetime(2024, 3, 4, 17, 0),
    )
    db.add_all([shift, other_shift])
    db.commit()

    return {
        "org": org,
        "other_org": other_org,
        "owner": owner,
        "manager": manager,
        "employee": employee,
        "coworker": coworker,
        "outsider": outsider,
        "location": location,
        "other_location": other_location,
        "shift": shift,
        "other_shift": other_shift,
    }
