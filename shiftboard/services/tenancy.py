from __future__ import annotations

from typing import TypeVar

from sqlalchemy.orm import Session

from ..errors import NotFoundError
from ..models import User

RecordT = TypeVar("RecordT")


def get_scoped(
    db: Session,
    model: type[RecordT],
    record_id: int,
    org_id: int,
    *,
    label: str | None = None,
    for_update: bool = False,
) -> RecordT:
    """Load ``model`` by id, treating rows of another organization as missing."""
    query = db.query(model).filter(model.id == record_id)
    if for_update:
        query = query.with_for_update()
    record = query.one_or_none()
    if record is None or record.org_id != org_id:
        raise NotFoundError(f"{label or model.__name__} not found")
    return record


def get_org_user(db: Session, user_id: int, org_id: int, *, active_only: bool = False) -> User:
    user = get_scoped(db, User, user_id, org_id, label="User")
    if active_only and not user.is_active:
        raise NotFoundError("User not found")
    return user
