from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import bcrypt
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from .db import get_db
from .errors import AuthenticationError, AuthorizationError
from .models import User
from .permissions import MANAGE_USERS, has_capability, roles_with

SESSION_KEY = "user"


@dataclass(frozen=True)
class CallerContext:
    """The authenticated caller, resolved once per request."""

    id: int
    org_id: int
    role: str

    def can(self, capability: str) -> bool:
        return has_capability(self.role, capability)

    @property
    def is_privileged(self) -> bool:
        return self.can(MANAGE_USERS)


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def start_session(request: Request, user: User) -> None:
    request.session.clear()
    request.session[SESSION_KEY] = {"id": user.id}


def end_session(request: Request) -> None:
    request.session.clear()


def get_caller(request: Request, db: Session = Depends(get_db)) -> CallerContext:
    session_user = request.session.get(SESSION_KEY)
    if not session_user or "id" not in session_user:
        raise AuthenticationError()
    # Role and org are read from the store on every request so demotions apply immediately.
    user = db.query(User).filter(User.id == session_user["id"]).one_or_none()
    if not user or not user.is_active:
        request.session.clear()
        raise AuthenticationError()
    return CallerContext(id=user.id, org_id=user.org_id, role=user.role)


def require_role(*allowed: str) -> Callable[..., CallerContext]:
    """Dependency factory that admits only callers whose role is in ``allowed``."""

    def role_checker(caller: CallerContext = Depends(get_caller)) -> CallerContext:
        if caller.role not in allowed:
            raise AuthorizationError()
        return caller

    return role_checker


def require_capability(capability: str) -> Callable[..., CallerContext]:
    """
    Dependency factory that admits the roles carrying ``capability``.

    Usage:
        @router.post("/api/shifts")
        async def create_shift(caller: CallerContext = Depends(require_capability(MANAGE_SHIFTS))):
            ...
    """
    return require_role(*roles_with(capability))
