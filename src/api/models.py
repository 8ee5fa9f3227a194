"""Pydantic models for API request/response.

JSON bodies use camelCase keys; Python attributes stay snake_case.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from domain.model.user import User


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── requests ─────────────────────────────────────────────────
# Required fields are Optional here so that a missing value reaches the
# service and is reported with its own message instead of a schema error.

class RegisterRequest(CamelModel):
    """Request model for user registration."""
    email: Optional[str] = None
    password: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class LoginRequest(CamelModel):
    """Request model for user login."""
    email: Optional[str] = None
    password: Optional[str] = None


class UpdateProfileRequest(CamelModel):
    """Request model for partial profile updates."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class ChangePasswordRequest(CamelModel):
    current_password: Optional[str] = None
    new_password: Optional[str] = None


# ── responses ────────────────────────────────────────────────

class UserResponse(CamelModel):
    """Public view of a user. Never carries the password hash."""
    id: str
    email: str
    first_name: str
    last_name: str = ''
    is_active: bool = True
    created_at: datetime
    updated_at: datetime
    last_login: Optional[datetime] = None

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            is_active=user.is_active,
            created_at=user.created_at,
            updated_at=user.updated_at,
            last_login=user.last_login,
        )


class AuthData(CamelModel):
    user: UserResponse
    token: str = Field(..., description="Bearer token for subsequent requests")


class UserData(CamelModel):
    user: UserResponse


class AuthResponse(CamelModel):
    """Response model for register and login."""
    success: bool = True
    message: str
    data: AuthData


class ProfileResponse(CamelModel):
    success: bool = True
    data: UserData


class ProfileUpdateResponse(CamelModel):
    success: bool = True
    message: str
    data: UserData


class MessageResponse(CamelModel):
    success: bool = True
    message: str
