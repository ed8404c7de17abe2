"""
Auth API routes: register, login, profile.

Route prefix: /api/auth
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import db_session, get_password_hasher, get_token_service
from api.errors import InvalidCredentials
from auth.dependencies import get_current_user
from auth.jwt import TokenService
from auth.models import (
    AuthResponse,
    LoginRequest,
    ProfileResponse,
    RegisterRequest,
    to_user_out,
)
from auth.password import PasswordHasher
from auth.users import create_user, find_by_email, verify_password
from database.models import User

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    req: RegisterRequest,
    session: AsyncSession = Depends(db_session),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> Dict[str, Any]:
    """Register a new user."""
    user = await create_user(session, req.username, req.email, req.password, hasher)
    token = tokens.issue(str(user.user_id))
    logger.info("Registered user %s (%s)", user.username, user.user_id)

    return {
        "message": "User registered successfully",
        "token": token,
        "user": to_user_out(user),
    }


@router.post("/login", response_model=AuthResponse)
async def login(
    req: LoginRequest,
    session: AsyncSession = Depends(db_session),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> Dict[str, Any]:
    """Login with email + password."""
    user = await find_by_email(session, req.email)

    # Same answer and same bcrypt cost for unknown email and wrong password.
    if user is None:
        matched = hasher.verify_dummy(req.password)
    else:
        matched = verify_password(hasher, user, req.password)
    if not matched:
        logger.warning("Failed login for %s", req.email)
        raise InvalidCredentials()

    token = tokens.issue(str(user.user_id))
    logger.info("Login: %s (%s)", user.username, user.user_id)

    return {
        "message": "Login successful",
        "token": token,
        "user": to_user_out(user),
    }


@router.get("/profile", response_model=ProfileResponse)
async def profile(user: User = Depends(get_current_user)) -> Dict[str, Any]:
    """Return the authenticated user."""
    return {
        "message": "Profile retrieved successfully",
        "user": to_user_out(user),
    }
