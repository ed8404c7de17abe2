"""Request / response schemas for the auth routes."""

from __future__ import annotations

import re

from pydantic import BaseModel, EmailStr, Field, field_validator

from auth.password import MAX_PASSWORD_BYTES
from database.models import User
from utils.schemas import UserOut

_USERNAME_RE = re.compile(r"^[A-Za-z0-9_]+$")


def _strip(value):
    return value.strip() if isinstance(value, str) else value


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=30)
    email: EmailStr
    password: str = Field(..., min_length=6)

    @field_validator("username", "email", mode="before")
    @classmethod
    def _strip_whitespace(cls, value):
        return _strip(value)

    @field_validator("username")
    @classmethod
    def _username_charset(cls, value: str) -> str:
        if not _USERNAME_RE.match(value):
            raise ValueError("Username can only contain letters, numbers, and underscores")
        return value

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        return value.lower()

    @field_validator("password")
    @classmethod
    def _bcrypt_limit(cls, value: str) -> str:
        if len(value.encode()) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password cannot exceed {MAX_PASSWORD_BYTES} bytes")
        return value


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def _strip_whitespace(cls, value):
        return _strip(value)

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        return value.lower()


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserOut


class ProfileResponse(BaseModel):
    message: str
    user: UserOut


def to_user_out(user: User) -> UserOut:
    """Public view of a user; the password hash never leaves the server."""
    return UserOut(
        id=user.user_id,
        username=user.username,
        email=user.email,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )
