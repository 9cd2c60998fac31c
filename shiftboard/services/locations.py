from __future__ import annotations

from typing import Sequence

from sqlalchemy.orm import Session

from ..config import get_settings
from ..models import Location
from ..schemas.location import LocationCreate, LocationUpdate
from ..security import CallerContext
from .tenancy import get_scoped


def list_locations(db: Session, org_id: int) -> Sequence[Location]:
    return db.query(Location).filter(Location.org_id == org_id).order_by(Location.name.asc()).all()


def create_location(db: Session, caller: CallerContext, payload: LocationCreate) -> Location:
    location = Location(
        org_id=caller.org_id,
        name=payload.name.strip(),
        address=payload.address,
        timezone=payload.timezone or get_settings().default_location_timezone,
        is_active=True,
    )
    db.add(location)
    db.commit()
    return location


def update_location(db: Session, caller: CallerContext, location_id: int, payload: LocationUpdate) -> Location:
    location = get_scoped(db, Location, location_id, caller.org_id, label="Location")
    changes = payload.model_dump(exclude_unset=True)
    for required in ("name", "timezone", "is_active"):
        if required in changes and changes[required] is None:
            changes.pop(required)
    for field, value in changes.items():
        setattr(location, field, value)
    db.commit()
    return location
