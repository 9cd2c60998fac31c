from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..db import get_db
from ..permissions import MANAGE_SHIFTS
from ..schemas.base import naive_utc
from ..schemas.shift import ShiftCreate, ShiftRead, ShiftUpdate
from ..security import CallerContext, get_caller, require_capability
from ..services import shifts as shift_service

router = APIRouter(prefix="/api/shifts", tags=["shifts"])


@router.get("", response_model=list[ShiftRead])
async def list_shifts(
    start: datetime | None = None,
    end: datetime | None = None,
    location_id: int | None = Query(default=None, alias="locationId"),
    user_id: int | None = Query(default=None, alias="userId"),
    caller: CallerContext = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return shift_service.list_shifts(
        db,
        caller.org_id,
        start=naive_utc(start),
        end=naive_utc(end),
        location_id=location_id,
        user_id=user_id,
    )


@router.post("", response_model=ShiftRead, status_code=status.HTTP_201_CREATED)
async def create_shift(
    payload: ShiftCreate,
    caller: CallerContext = Depends(require_capability(MANAGE_SHIFTS)),
    db: Session = Depends(get_db),
):
    return shift_service.create_shift(db, caller, payload)


@router.get("/{shift_id}", response_model=ShiftRead)
async def get_shift(shift_id: int, caller: CallerContext = Depends(get_caller), db: Session = Depends(get_db)):
    return shift_service.get_shift(db, caller, shift_id)


@router.patch("/{shift_id}", response_model=ShiftRead)
async def update_shift(
    shift_id: int,
    payload: ShiftUpdate,
    caller: CallerContext = Depends(require_capability(MANAGE_SHIFTS)),
    db: Session = Depends(get_db),
):
    return shift_service.update_shift(db, caller, shift_id, payload)


@router.delete("/{shift_id}")
async def delete_shift(
    shift_id: int,
    caller: CallerContext = Depends(require_capability(MANAGE_SHIFTS)),
    db: Session = Depends(get_db),
):
    shift_service.delete_shift(db, caller, shift_id)
    return JSONResponse({"message": "Shift deleted"})
