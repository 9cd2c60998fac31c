from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..db import get_db
from ..permissions import MANAGE_LOCATIONS
from ..schemas.location import LocationCreate, LocationRead, LocationUpdate
from ..security import CallerContext, get_caller, require_capability
from ..services import locations as location_service

router = APIRouter(prefix="/api/locations", tags=["locations"])


@router.get("", response_model=list[LocationRead])
async def list_locations(caller: CallerContext = Depends(get_caller), db: Session = Depends(get_db)):
    return location_service.list_locations(db, caller.org_id)


@router.post("", response_model=LocationRead, status_code=status.HTTP_201_CREATED)
async def create_location(
    payload: LocationCreate,
    caller: CallerContext = Depends(require_capability(MANAGE_LOCATIONS)),
    db: Session = Depends(get_db),
):
    return location_service.create_location(db, caller, payload)


@router.patch("/{location_id}", response_model=LocationRead)
async def update_location(
    location_id: int,
    payload: LocationUpdate,
    caller: CallerContext = Depends(require_capability(MANAGE_LOCATIONS)),
    db: Session = Depends(get_db),
):
    return location_service.update_location(db, caller, location_id, payload)
