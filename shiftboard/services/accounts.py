from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy.orm import Session

from ..config import get_settings
from ..constants import DEFAULT_LOCATION_NAME, DEFAULT_PLAN_TIER, ROLE_OWNER
from ..errors import AuthenticationError, AuthorizationError, ValidationError
from ..models import Location, Organization, User
from ..permissions import can_assign_role, outranks, writable_user_fields
from ..schemas.auth import RegisterRequest
from ..schemas.user import UserCreate, UserUpdate
from ..security import CallerContext, get_password_hash, verify_password
from .tenancy import get_org_user

logger = logging.getLogger(__name__)


def _email_taken(db: Session, email: str, exclude_user_id: int | None = None) -> bool:
    query = db.query(User.id).filter(User.email == email)
    if exclude_user_id is not None:
        query = query.filter(User.id != exclude_user_id)
    return query.first() is not None


def register_organization(db: Session, payload: RegisterRequest) -> User:
    """Create an organization with its owner and a default location."""
    email = payload.email.lower()
    if _email_taken(db, email):
        raise ValidationError("Email already in use")

    org = Organization(name=payload.organization_name, plan_tier=DEFAULT_PLAN_TIER)
    db.add(org)
    db.flush()

    owner = User(
        org_id=org.id,
        email=email,
        password_hash=get_password_hash(payload.password),
        first_name=payload.first_name,
        last_name=payload.last_name,
        role=ROLE_OWNER,
        is_active=True,
    )
    db.add(owner)
    db.add(
        Location(
            org_id=org.id,
            name=DEFAULT_LOCATION_NAME,
            timezone=get_settings().default_location_timezone,
            is_active=True,
        )
    )
    db.commit()
    logger.info("Registered organization %s with owner %s", org.id, owner.id)
    return owner


def authenticate(db: Session, email: str, password: str) -> User:
    user = db.query(User).filter(User.email == email.lower()).one_or_none()
    if not user or not verify_password(password, user.password_hash):
        raise AuthenticationError("Invalid credentials")
    if not user.is_active:
        raise AuthorizationError("Account is deactivated. Contact your manager.")
    return user


def change_password(db: Session, caller: CallerContext, current_password: str, new_password: str) -> None:
    user = get_org_user(db, caller.id, caller.org_id)
    if not verify_password(current_password, user.password_hash):
        raise ValidationError("Current password is incorrect")
    if current_password == new_password:
        raise ValidationError("New password must be different")
    user.password_hash = get_password_hash(new_password)
    db.commit()


def get_organization(db: Session, org_id: int) -> Organization | None:
    return db.get(Organization, org_id)


def list_users(db: Session, org_id: int) -> Sequence[User]:
    return (
        db.query(User)
        .filter(User.org_id == org_id)
        .order_by(User.first_name.asc(), User.last_name.asc(), User.id.asc())
        .all()
    )


def create_user(db: Session, caller: CallerContext, payload: UserCreate) -> User:
    if not can_assign_role(caller.role, payload.role):
        raise AuthorizationError(f"You cannot create a user with the {payload.role} role.")
    email = payload.email.lower()
    if _email_taken(db, email):
        raise ValidationError("Email already in use")

    user = User(
        org_id=caller.org_id,
        email=email,
        password_hash=get_password_hash(payload.password),
        first_name=payload.first_name.strip(),
        last_name=payload.last_name.strip(),
        phone=payload.phone,
        role=payload.role,
        position=payload.position,
        hourly_rate=payload.hourly_rate,
        is_active=True,
    )
    db.add(user)
    db.commit()
    return user


def update_user(db: Session, caller: CallerContext, user_id: int, payload: UserUpdate) -> User:
    """Apply a profile or admin edit.

    Owners and managers may edit anyone in the organization; employees only
    themselves. Only the fields the caller may write are kept and the rest of
    the payload is dropped without error, so an employee sending ``role`` on
    their own profile keeps their role, and a manager editing a peer or the
    owner changes profile fields only.
    """
    target = get_org_user(db, user_id, caller.org_id)
    editing_self = target.id == caller.id
    if not editing_self and not caller.is_privileged:
        raise AuthorizationError("You can only edit your own profile.")

    allowed = writable_user_fields(caller.role, editing_self, outranks(caller.role, target.role))
    changes = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if field in allowed
    }

    for required in ("email", "first_name", "last_name", "role", "is_active"):
        if required in changes and changes[required] is None:
            changes.pop(required)

    if "role" in changes and changes["role"] != target.role and not can_assign_role(caller.role, changes["role"]):
        raise AuthorizationError(f"You cannot assign the {changes['role']} role.")
    if "email" in changes:
        changes["email"] = changes["email"].lower()
        if _email_taken(db, changes["email"], exclude_user_id=target.id):
            raise ValidationError("Email already in use")
    for name_field in ("first_name", "last_name"):
        if name_field in changes:
            changes[name_field] = changes[name_field].strip()
            if not changes[name_field]:
                raise ValidationError("Name cannot be empty.")

    for field, value in changes.items():
        setattr(target, field, value)
    db.commit()
    return target
