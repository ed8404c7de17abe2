"""
Tests for token issue / verification.
"""

import pytest

from auth.jwt import TokenExpired, TokenInvalid, TokenService

WEEK = 7 * 24 * 3600


class _Clock:
    def __init__(self, now: float):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestTokenService:
    def setup_method(self):
        self.clock = _Clock(1_700_000_000.0)
        self.tokens = TokenService("secret-a", WEEK, clock=self.clock)

    def test_roundtrip_immediately_after_issue(self):
        token = self.tokens.issue("user-1")
        assert self.tokens.verify(token) == "user-1"

    def test_valid_until_just_before_expiry(self):
        token = self.tokens.issue("user-1")
        self.clock.now += WEEK - 1
        assert self.tokens.verify(token) == "user-1"

    def test_expired_after_seven_days(self):
        token = self.tokens.issue("user-1")
        self.clock.now += WEEK + 1
        with pytest.raises(TokenExpired):
            self.tokens.verify(token)

    def test_other_secret_is_invalid(self):
        token = TokenService("secret-b", WEEK, clock=self.clock).issue("user-1")
        with pytest.raises(TokenInvalid):
            self.tokens.verify(token)

    def test_other_secret_is_invalid_even_when_expired(self):
        token = TokenService("secret-b", WEEK, clock=self.clock).issue("user-1")
        self.clock.now += 2 * WEEK
        with pytest.raises(TokenInvalid):
            self.tokens.verify(token)

    def test_tampered_payload_is_invalid(self):
        token = self.tokens.issue("user-1")
        forged = TokenService("secret-a", WEEK, clock=self.clock).issue("user-2")
        tampered = forged.split(".")[0] + "." + token.split(".")[1]
        with pytest.raises(TokenInvalid):
            self.tokens.verify(tampered)

    @pytest.mark.parametrize("garbage", ["", "no-dot", "a.b", "%%%.abc", "ünïcode.sig"])
    def test_garbage_is_invalid(self, garbage):
        with pytest.raises(TokenInvalid):
            self.tokens.verify(garbage)

    def test_empty_secret_rejected(self):
        with pytest.raises(ValueError):
            TokenService("")

    def test_from_settings_uses_configured_secret(self, settings):
        service = TokenService.from_settings(settings)
        token = service.issue("user-1")
        assert TokenService(settings.jwt_secret).verify(token) == "user-1"
