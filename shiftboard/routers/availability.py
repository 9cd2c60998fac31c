from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas.availability import AvailabilityCreate, AvailabilityRead
from ..security import CallerContext, get_caller
from ..services import availability as availability_service

router = APIRouter(prefix="/api/availability", tags=["availability"])


@router.get("", response_model=list[AvailabilityRead])
async def list_availability(
    user_id: int | None = Query(default=None, alias="userId"),
    caller: CallerContext = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return availability_service.list_availability(db, caller, user_id)


@router.post("", response_model=AvailabilityRead, status_code=status.HTTP_201_CREATED)
async def add_availability(
    payload: AvailabilityCreate,
    caller: CallerContext = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return availability_service.add_availability(db, caller, payload)


@router.delete("/{availability_id}")
async def remove_availability(
    availability_id: int,
    caller: CallerContext = Depends(get_caller),
    db: Session = Depends(get_db),
):
    availability_service.remove_availability(db, caller, availability_id)
    return JSONResponse({"message": "Availability removed"})
