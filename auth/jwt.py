"""
JWT-style token creation and verification.

Tokens are base64url-encoded JSON payloads signed with HMAC-SHA256:
``<payload>.<hex signature>``.  The secret comes from ``Settings.jwt_secret``
and is handed to ``TokenService`` at startup.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode
from typing import Callable

from config.settings import Settings


class TokenError(Exception):
    """Base class for token verification failures."""


class TokenInvalid(TokenError):
    """Malformed token or bad signature."""


class TokenExpired(TokenError):
    """Signature is fine but the expiry has passed."""


class TokenService:
    def __init__(
        self,
        secret: str,
        expiry_seconds: int = 604800,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._secret = secret.encode()
        self._expiry_seconds = expiry_seconds
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(settings.jwt_secret, settings.jwt_expiry_seconds)

    def _sign(self, raw: bytes) -> str:
        return hmac.new(self._secret, raw, hashlib.sha256).hexdigest()

    def issue(self, user_id: str) -> str:
        """Create a signed token containing ``user_id`` and expiry."""
        payload = {
            "user_id": str(user_id),
            "exp": int(self._clock()) + self._expiry_seconds,
        }
        raw = json.dumps(payload, separators=(",", ":")).encode()
        return urlsafe_b64encode(raw).decode() + "." + self._sign(raw)

    def verify(self, token: str) -> str:
        """
        Verify token and return ``user_id``.

        Signature is checked before expiry; raises ``TokenInvalid`` or
        ``TokenExpired``.
        """
        parts = token.split(".", 1)
        if len(parts) != 2:
            raise TokenInvalid("bad format")
        try:
            raw = urlsafe_b64decode(parts[0].encode())
        except ValueError as exc:
            raise TokenInvalid("bad encoding") from exc
        if not hmac.compare_digest(parts[1].encode(), self._sign(raw).encode()):
            raise TokenInvalid("bad signature")

        try:
            payload = json.loads(raw)
            user_id = payload["user_id"]
            exp = int(payload["exp"])
        except (ValueError, KeyError, TypeError) as exc:
            raise TokenInvalid("bad payload") from exc

        if exp <= self._clock():
            raise TokenExpired("token expired")
        return user_id
