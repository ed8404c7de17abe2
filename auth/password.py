"""
Password hashing and verification.

bcrypt with automatic salting; the work factor comes from
``Settings.bcrypt_rounds``.  bcrypt only looks at the first 72 bytes of
input, so longer passwords are refused at the request layer.
"""

from __future__ import annotations

import bcrypt

from config.settings import Settings

MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds
        # Checked against when no stored hash exists, so that path costs the same.
        self._dummy_hash = self.hash("no-such-user")

    @classmethod
    def from_settings(cls, settings: Settings) -> "PasswordHasher":
        return cls(settings.bcrypt_rounds)

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self.rounds)).decode()

    def verify(self, password: str, password_hash: str) -> bool:
        """Constant-time check; a malformed stored hash never matches."""
        try:
            return bcrypt.checkpw(password.encode(), password_hash.encode())
        except (ValueError, TypeError):
            return False

    def verify_dummy(self, password: str) -> bool:
        """Spend one bcrypt check for an unknown account; always False."""
        self.verify(password, self._dummy_hash)
        return False
