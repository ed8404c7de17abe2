"""
Tests for the register / login / profile routes and the auth gate.
"""

import uuid

import pytest
from unittest.mock import patch

from auth.password import PasswordHasher
from conftest import register


class TestRegisterAndLogin:
    async def test_register_returns_token_and_public_user(self, client):
        resp = await client.post(
            "/api/auth/register",
            json={"username": "alice", "email": "Alice@Example.com", "password": "secret123"},
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["token"]
        assert body["user"]["username"] == "alice"
        assert body["user"]["email"] == "alice@example.com"
        assert "createdAt" in body["user"]
        assert "password" not in resp.text
        assert "passwordHash" not in body["user"]

    async def test_duplicate_email_case_insensitive(self, client):
        await register(client)
        resp = await client.post(
            "/api/auth/register",
            json={"username": "alice2", "email": "ALICE@example.com", "password": "secret123"},
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "USER_EXISTS"

    async def test_duplicate_username(self, client):
        await register(client)
        resp = await client.post(
            "/api/auth/register",
            json={"username": "alice", "email": "other@example.com", "password": "secret123"},
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "USER_EXISTS"

    @pytest.mark.parametrize(
        "payload",
        [
            {"username": "al", "email": "a@example.com", "password": "secret123"},
            {"username": "a" * 31, "email": "a@example.com", "password": "secret123"},
            {"username": "bad name!", "email": "a@example.com", "password": "secret123"},
            {"username": "alice", "email": "not-an-email", "password": "secret123"},
            {"username": "alice", "email": "alice@example..com", "password": "secret123"},
            {"username": "alice", "email": "alice@.example.com", "password": "secret123"},
            {"username": "alice", "email": "alice@example", "password": "secret123"},
            {"username": "alice", "email": "a@example.com", "password": "short"},
            {"username": "alice", "email": "a@example.com"},
        ],
    )
    async def test_register_validation(self, client, payload):
        resp = await client.post("/api/auth/register", json=payload)
        assert resp.status_code == 400
        body = resp.json()
        assert body["error"] == "VALIDATION_ERROR"
        assert body["errors"]

    async def test_login_success(self, client):
        await register(client)
        resp = await client.post(
            "/api/auth/login", json={"email": "ALICE@example.com", "password": "secret123"}
        )
        assert resp.status_code == 200
        assert resp.json()["user"]["username"] == "alice"
        assert resp.json()["token"]

    async def test_login_errors_do_not_reveal_which_part_failed(self, client):
        await register(client)
        wrong_password = await client.post(
            "/api/auth/login", json={"email": "alice@example.com", "password": "wrong-one"}
        )
        unknown_user = await client.post(
            "/api/auth/login", json={"email": "ghost@example.com", "password": "secret123"}
        )
        assert wrong_password.status_code == unknown_user.status_code == 400
        assert wrong_password.json() == unknown_user.json()
        assert wrong_password.json()["error"] == "INVALID_CREDENTIALS"

    async def test_unknown_email_costs_one_bcrypt_check(self, client):
        await register(client)
        original = PasswordHasher.verify
        with patch.object(
            PasswordHasher, "verify", autospec=True, side_effect=original
        ) as verify:
            await client.post(
                "/api/auth/login", json={"email": "ghost@example.com", "password": "secret123"}
            )
            unknown_calls = verify.call_count
            verify.reset_mock()
            await client.post(
                "/api/auth/login", json={"email": "alice@example.com", "password": "wrong-one"}
            )
            wrong_password_calls = verify.call_count
        assert unknown_calls == wrong_password_calls == 1


class TestAuthGate:
    async def test_profile(self, client):
        headers = await register(client)
        resp = await client.get("/api/auth/profile", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["user"]["username"] == "alice"

    @pytest.mark.parametrize("headers", [{}, {"Authorization": "Basic abc"}])
    async def test_missing_token(self, client, headers):
        resp = await client.get("/api/tasks", headers=headers)
        assert resp.status_code == 401
        assert resp.json()["error"] == "NO_TOKEN"

    async def test_invalid_token(self, client):
        resp = await client.get("/api/auth/profile", headers={"Authorization": "Bearer nonsense"})
        assert resp.status_code == 401
        assert resp.json()["error"] == "INVALID_TOKEN"

    async def test_token_from_other_secret(self, client):
        from auth.jwt import TokenService

        token = TokenService("another-secret").issue(str(uuid.uuid4()))
        resp = await client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.json()["error"] == "INVALID_TOKEN"

    async def test_expired_token(self, client, app, settings):
        from auth.jwt import TokenService

        await register(client)
        login = await client.post(
            "/api/auth/login", json={"email": "alice@example.com", "password": "secret123"}
        )
        user_id = login.json()["user"]["id"]
        stale = TokenService(
            settings.jwt_secret, settings.jwt_expiry_seconds, clock=lambda: 1_000_000.0
        ).issue(user_id)
        resp = await client.get("/api/auth/profile", headers={"Authorization": f"Bearer {stale}"})
        assert resp.status_code == 401
        assert resp.json()["error"] == "TOKEN_EXPIRED"

    async def test_valid_token_for_unknown_user(self, client, app):
        token = app.state.token_service.issue(str(uuid.uuid4()))
        resp = await client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.json()["error"] == "USER_NOT_FOUND"


class TestHealth:
    async def test_health_is_public(self, client):
        resp = await client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "OK"
        assert "X-Process-Time" in resp.headers
