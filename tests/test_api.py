"""
tests.test_api

HTTP surface with the AuthService dependency backed by in-memory collaborators.
"""

from __future__ import annotations

import httpx
import pytest

from conftest import FakeExchange, FakePool, FakeUser
from federated_login.api.app import create_app
from federated_login.api.deps import auth_service
from federated_login.directory.errors import DirectoryError
from federated_login.directory.models import AuthFailed
from federated_login.flows import FederationConfig
from federated_login.services.auth_service import AuthService
from federated_login.settings import Settings


def _client(pool: FakePool, config: FederationConfig) -> httpx.AsyncClient:
    app = create_app(settings=Settings(env="test"))
    svc = AuthService(pool=pool, exchange=FakeExchange(), config=config)
    app.dependency_overrides[auth_service] = lambda: svc
    transport = httpx.ASGITransport(app=app)
    return httpx.AsyncClient(transport=transport, base_url="http://test")


@pytest.mark.asyncio
async def test_healthz(config: FederationConfig) -> None:
    async with _client(FakePool(), config) as client:
        r = await client.get("/healthz")

    assert r.status_code == 200
    assert r.json() == {"status": "ok"}
    assert r.headers["x-request-id"]


@pytest.mark.asyncio
async def test_login_renders_logged_in_with_credentials(config: FederationConfig) -> None:
    user = FakeUser("alice", attributes={"email": "a@b.com", "email_verified": "true"})

    async with _client(FakePool(users={"alice": user}), config) as client:
        r = await client.post("/v1/auth/login", json={"username": "alice", "password": "pw"})

    assert r.status_code == 200
    body = r.json()
    assert body["kind"] == "logged_in"
    assert body["username"] == "alice"
    assert body["attributes"] == {"email": "a@b.com", "email_verified": "true"}
    assert body["session"]["id_token"] == "id-token-alice"
    assert body["credentials"]["access_key_id"] == "ASIAEXAMPLE"


@pytest.mark.asyncio
async def test_login_failure_is_a_rendered_outcome(config: FederationConfig) -> None:
    error = DirectoryError("NotAuthorizedException", "Incorrect username or password.")
    user = FakeUser("alice", auth_result=AuthFailed(error=error))

    async with _client(FakePool(users={"alice": user}), config) as client:
        r = await client.post("/v1/auth/login", json={"username": "alice", "password": "bad"})

    assert r.status_code == 200
    assert r.json()["kind"] == "login_failure"
    assert r.json()["reason"] == "Incorrect username or password."
    assert r.json()["session"] is None
    assert r.json()["credentials"] is None


@pytest.mark.asyncio
async def test_pending_verification_gets_tokens_but_no_credentials(config: FederationConfig) -> None:
    user = FakeUser("alice", attributes={"email": "a@b.com"})

    async with _client(FakePool(users={"alice": user}), config) as client:
        r = await client.post("/v1/auth/login", json={"username": "alice", "password": "pw"})

    body = r.json()
    assert body["kind"] == "email_verification_required"
    assert body["delivery_medium"] == "EMAIL"
    assert body["session"]["access_token"] == "access-token-alice"
    assert body["credentials"] is None


@pytest.mark.asyncio
async def test_register_rejection_is_400(config: FederationConfig) -> None:
    pool = FakePool(sign_up_error=DirectoryError("InvalidPasswordException", "Password did not conform with policy"))

    async with _client(pool, config) as client:
        r = await client.post(
            "/v1/auth/register",
            json={"username": "alice", "password": "pw", "attributes": {"email": "a@b.com"}},
        )

    assert r.status_code == 400
    assert r.json()["detail"] == "Password did not conform with policy"


@pytest.mark.asyncio
async def test_attributes_require_bearer_token(config: FederationConfig) -> None:
    async with _client(FakePool(), config) as client:
        r = await client.put("/v1/auth/attributes", json={"attributes": {"given_name": "A"}})
        assert r.status_code == 401

        r = await client.put(
            "/v1/auth/attributes",
            json={"attributes": {"given_name": "A"}},
            headers={"Authorization": "Bearer unknown"},
        )
        assert r.status_code == 401


@pytest.mark.asyncio
async def test_attributes_update(config: FederationConfig) -> None:
    user = FakeUser("alice", attributes={"email": "a@b.com", "email_verified": "true"})

    async with _client(FakePool(users={"alice": user}), config) as client:
        r = await client.put(
            "/v1/auth/attributes",
            json={"attributes": {"given_name": "A"}},
            headers={"Authorization": "Bearer access-token-alice"},
        )

    assert r.status_code == 200
    assert r.json()["kind"] == "logged_in"
    assert r.json()["attributes"]["given_name"] == "A"


@pytest.mark.asyncio
async def test_change_password(config: FederationConfig) -> None:
    user = FakeUser("alice")

    async with _client(FakePool(users={"alice": user}), config) as client:
        r = await client.post(
            "/v1/auth/password",
            json={"previous_password": "old", "proposed_password": "new"},
            headers={"Authorization": "Bearer access-token-alice"},
        )

    assert r.status_code == 200
    assert r.json() == {"status": "SUCCESS"}


class ExpiringSessionUser(FakeUser):
    """Session fetch works during login, then the refresh is rejected."""

    async def get_session(self):
        session = await super().get_session()
        if self.calls.count("get_session") > 1:
            raise DirectoryError("NotAuthorizedException", "Refresh Token has expired")
        return session


@pytest.mark.asyncio
async def test_login_outcome_survives_later_session_failure(config: FederationConfig) -> None:
    user = ExpiringSessionUser("alice", attributes={"email": "a@b.com", "email_verified": "true"})
    svc = AuthService(pool=FakePool(users={"alice": user}), exchange=FakeExchange(), config=config)

    result = await svc.login(username="alice", password="pw")

    assert result.outcome.kind == "logged_in"
    assert result.session is None
    assert result.credentials is not None

    user = ExpiringSessionUser("alice", attributes={"email": "a@b.com", "email_verified": "true"})
    async with _client(FakePool(users={"alice": user}), config) as client:
        r = await client.post("/v1/auth/login", json={"username": "alice", "password": "pw"})

    assert r.status_code == 200
    assert r.json()["kind"] == "logged_in"
    assert r.json()["session"] is None


@pytest.mark.asyncio
async def test_caller_request_id_is_echoed(config: FederationConfig) -> None:
    async with _client(FakePool(), config) as client:
        r = await client.get("/healthz", headers={"x-request-id": "req-123"})

    assert r.headers["x-request-id"] == "req-123"
