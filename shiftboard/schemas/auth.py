from pydantic import EmailStr, Field, field_validator

from ..constants import MIN_PASSWORD_LENGTH
from .base import ApiModel
from .user import UserRead


class RegisterRequest(ApiModel):
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    organization_name: str = Field(..., min_length=1)

    @field_validator("first_name", "last_name", "organization_name")
    @classmethod
    def strip_required(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("This field is required")
        return cleaned


class LoginRequest(ApiModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ChangePasswordRequest(ApiModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)


class OrganizationRead(ApiModel):
    id: int
    name: str
    plan_tier: str


class SessionUser(ApiModel):
    user: UserRead


class MeResponse(ApiModel):
    user: UserRead
    organization: OrganizationRead | None = None
