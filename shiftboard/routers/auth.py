from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas.auth import ChangePasswordRequest, LoginRequest, MeResponse, OrganizationRead, RegisterRequest, SessionUser
from ..schemas.user import UserRead
from ..security import CallerContext, end_session, get_caller, start_session
from ..services import accounts
from ..services.tenancy import get_org_user

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=SessionUser, status_code=status.HTTP_201_CREATED)
async def register(request: Request, payload: RegisterRequest, db: Session = Depends(get_db)):
    owner = accounts.register_organization(db, payload)
    start_session(request, owner)
    return SessionUser(user=UserRead.model_validate(owner))


@router.post("/login", response_model=SessionUser)
async def login(request: Request, payload: LoginRequest, db: Session = Depends(get_db)):
    user = accounts.authenticate(db, payload.email, payload.password)
    start_session(request, user)
    return SessionUser(user=UserRead.model_validate(user))


@router.post("/logout")
async def logout(request: Request):
    end_session(request)
    return JSONResponse({"message": "Logged out"})


@router.get("/me", response_model=MeResponse)
async def me(caller: CallerContext = Depends(get_caller), db: Session = Depends(get_db)):
    user = get_org_user(db, caller.id, caller.org_id)
    org = accounts.get_organization(db, caller.org_id)
    return MeResponse(
        user=UserRead.model_validate(user),
        organization=OrganizationRead.model_validate(org) if org else None,
    )


@router.post("/change-password")
async def change_password(
    payload: ChangePasswordRequest,
    caller: CallerContext = Depends(get_caller),
    db: Session = Depends(get_db),
):
    accounts.change_password(db, caller, payload.current_password, payload.new_password)
    return JSONResponse({"message": "Password updated"})
