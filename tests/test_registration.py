from __future__ import annotations

import pytest

from conftest import FakeExchange, FakePool
from federated_login.directory.errors import DirectoryError
from federated_login.flows import CredentialProvider, FederationConfig, register_user
from federated_login.flows.outcomes import ConfirmationRequired, LoggedIn


@pytest.mark.asyncio
async def test_auto_confirmed_account_is_logged_in(
    config: FederationConfig, exchange: FakeExchange, credentials: CredentialProvider
) -> None:
    pool = FakePool(user_confirmed=True)

    outcome = await register_user(
        pool, config, "alice", "pw", {"email": "a@b.com"}, exchange=exchange, credentials=credentials
    )

    user = pool.users["alice"]
    assert outcome == LoggedIn(user=user, attributes={"email": "a@b.com", "email_verified": "true"})
    assert pool.sign_ups[0]["attribute_list"] == [{"Name": "email", "Value": "a@b.com"}]
    assert user.passwords == ["pw"]


@pytest.mark.asyncio
async def test_unconfirmed_account_skips_authentication(
    config: FederationConfig, exchange: FakeExchange, credentials: CredentialProvider
) -> None:
    pool = FakePool(user_confirmed=False)

    outcome = await register_user(
        pool, config, "alice", "pw", {"email": "a@b.com"}, exchange=exchange, credentials=credentials
    )

    user = pool.users["alice"]
    assert outcome == ConfirmationRequired(user=user)
    assert user.calls == []
    assert exchange.requests == []


@pytest.mark.asyncio
async def test_sign_up_rejection_raises(
    config: FederationConfig, exchange: FakeExchange, credentials: CredentialProvider
) -> None:
    pool = FakePool(sign_up_error=DirectoryError("UsernameExistsException", "User already exists"))

    with pytest.raises(DirectoryError, match="User already exists"):
        await register_user(
            pool, config, "alice", "pw", {}, exchange=exchange, credentials=credentials
        )


@pytest.mark.asyncio
async def test_validation_data_is_encoded(
    config: FederationConfig, exchange: FakeExchange, credentials: CredentialProvider
) -> None:
    pool = FakePool(user_confirmed=False)

    await register_user(
        pool,
        config,
        "alice",
        "pw",
        {"email": "a@b.com"},
        exchange=exchange,
        credentials=credentials,
        validation_data={"invite": True},
    )

    assert pool.sign_ups[0]["validation_data"] == [{"Name": "invite", "Value": "true"}]
