"""Pydantic v2 request/response schemas for authentication and profile endpoints."""

import re
import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from hostelconnect.auth.passwords import password_problem
from hostelconnect.auth.roles import Role

PHONE_PATTERN = re.compile(r"^\+?[\d\s\-().]{10,15}$")


def _check_phone(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if not PHONE_PATTERN.match(value):
        raise ValueError("Please enter a valid phone number")
    return value


def _normalize_email(value: str | None) -> str | None:
    return None if value is None else value.strip().lower()


def _check_full_name(value: str) -> str:
    value = value.strip()
    if len(value) < 2:
        raise ValueError("Full name must be at least 2 characters")
    return value


def _check_password(value: str) -> str:
    problem = password_problem(value)
    if problem:
        raise ValueError(problem)
    return value


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Schema for user registration. Unknown roles are rejected here."""

    email: EmailStr
    password: str = Field(..., max_length=128)
    full_name: str = Field(..., max_length=255)
    phone_number: str | None = Field(None, max_length=50)
    role: Role = Role.STUDENT

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, value: str) -> str:
        return _check_full_name(value)

    @field_validator("phone_number")
    @classmethod
    def validate_phone(cls, value: str | None) -> str | None:
        return _check_phone(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return _check_password(value)


class LoginRequest(BaseModel):
    """Schema for email/password login."""

    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return _normalize_email(value)


class RefreshRequest(BaseModel):
    """Schema for token refresh."""

    refresh_token: str


class ProfileUpdate(BaseModel):
    """Partial profile update. Changing the password needs the current one."""

    full_name: str | None = Field(None, max_length=255)
    phone_number: str | None = Field(None, max_length=50)
    email: EmailStr | None = None
    new_password: str | None = Field(None, max_length=128)
    current_password: str | None = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str | None) -> str | None:
        return _normalize_email(value)

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, value: str | None) -> str | None:
        return None if value is None else _check_full_name(value)

    @field_validator("phone_number")
    @classmethod
    def validate_phone(cls, value: str | None) -> str | None:
        return _check_phone(value)

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, value: str | None) -> str | None:
        return None if value is None else _check_password(value)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class TokenResponse(BaseModel):
    """JWT token pair returned on successful authentication."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    """Profile information for the signed-in user."""

    id: uuid.UUID
    email: str
    full_name: str
    phone_number: str | None = None
    role: str
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserSummary(BaseModel):
    """Contact details shown to the other side of a booking."""

    id: uuid.UUID
    full_name: str
    email: str
    phone_number: str | None = None

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    """Combined user + tokens returned on register/login."""

    user: UserResponse
    tokens: TokenResponse
    redirect_to: str


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str
