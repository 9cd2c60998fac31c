from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..db import get_db
from ..permissions import REVIEW_SWAPS
from ..schemas.swap import SwapCreate, SwapRead
from ..schemas.time_off import ReviewRequest
from ..security import CallerContext, get_caller, require_capability
from ..services import swaps as swap_service

router = APIRouter(prefix="/api/swaps", tags=["swaps"])


@router.get("", response_model=list[SwapRead])
async def list_swaps(caller: CallerContext = Depends(get_caller), db: Session = Depends(get_db)):
    return swap_service.list_swaps(db, caller)


@router.post("", response_model=SwapRead, status_code=status.HTTP_201_CREATED)
async def request_swap(
    payload: SwapCreate,
    caller: CallerContext = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return swap_service.request_swap(db, caller, payload)


@router.patch("/{swap_id}", response_model=SwapRead)
async def review_swap(
    swap_id: int,
    payload: ReviewRequest,
    caller: CallerContext = Depends(require_capability(REVIEW_SWAPS)),
    db: Session = Depends(get_db),
):
    return swap_service.review_swap(db, caller, swap_id, payload.status)
