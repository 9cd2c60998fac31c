from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..db import get_db
from ..permissions import MANAGE_USERS
from ..schemas.user import UserCreate, UserRead, UserUpdate
from ..security import CallerContext, get_caller, require_capability
from ..services import accounts
from ..services.tenancy import get_org_user

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=list[UserRead])
async def list_users(caller: CallerContext = Depends(get_caller), db: Session = Depends(get_db)):
    return accounts.list_users(db, caller.org_id)


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    caller: CallerContext = Depends(require_capability(MANAGE_USERS)),
    db: Session = Depends(get_db),
):
    return accounts.create_user(db, caller, payload)


@router.get("/{user_id}", response_model=UserRead)
async def get_user(user_id: int, caller: CallerContext = Depends(get_caller), db: Session = Depends(get_db)):
    return get_org_user(db, user_id, caller.org_id)


@router.patch("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: int,
    payload: UserUpdate,
    caller: CallerContext = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return accounts.update_user(db, caller, user_id, payload)
