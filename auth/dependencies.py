"""
FastAPI dependencies for authentication.

``get_current_user`` is the gate in front of every protected route: it
reads the Bearer token, verifies it, loads the user and puts it on
``request.state.user``.
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import db_session, get_token_service
from api.errors import AuthTokenMissing, InvalidToken, TokenExpired, UserNotFound
from auth import jwt
from auth.users import find_by_id
from database.models import User

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    session: AsyncSession = Depends(db_session),
    tokens: jwt.TokenService = Depends(get_token_service),
) -> User:
    """
    Resolve the Bearer token to its ``User`` and stash it on ``request.state``.

    Raises ``AuthTokenMissing``, ``TokenExpired``, ``InvalidToken`` or
    ``UserNotFound``, all rendered as 401.
    """
    if credentials is None or not credentials.credentials:
        raise AuthTokenMissing()

    try:
        user_id = uuid.UUID(str(tokens.verify(credentials.credentials)))
    except jwt.TokenExpired:
        logger.warning("Rejected expired token on %s", request.url.path)
        raise TokenExpired()
    except (jwt.TokenInvalid, ValueError):
        logger.warning("Rejected invalid token on %s", request.url.path)
        raise InvalidToken()

    user = await find_by_id(session, user_id)
    if user is None:
        logger.warning("Token for unknown user %s", user_id)
        raise UserNotFound()

    request.state.user = user
    return user
