from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..db import get_db
from ..permissions import REVIEW_TIME_OFF
from ..schemas.time_off import ReviewRequest, TimeOffCreate, TimeOffRead
from ..security import CallerContext, get_caller, require_capability
from ..services import time_off as time_off_service

router = APIRouter(prefix="/api/time-off", tags=["time-off"])


@router.get("", response_model=list[TimeOffRead])
async def list_time_off(caller: CallerContext = Depends(get_caller), db: Session = Depends(get_db)):
    return time_off_service.list_time_off(db, caller)


@router.post("", response_model=TimeOffRead, status_code=status.HTTP_201_CREATED)
async def submit_time_off(
    payload: TimeOffCreate,
    caller: CallerContext = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return time_off_service.submit_time_off(db, caller, payload)


@router.patch("/{request_id}", response_model=TimeOffRead)
async def review_time_off(
    request_id: int,
    payload: ReviewRequest,
    caller: CallerContext = Depends(require_capability(REVIEW_TIME_OFF)),
    db: Session = Depends(get_db),
):
    return time_off_service.review_time_off(db, caller, request_id, payload.status)
