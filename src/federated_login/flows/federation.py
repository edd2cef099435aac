"""
federated_login.flows.federation

Credential federation: directory identity token -> temporary pool-scoped credentials.

Responsibilities:
- Build the login assertion for the credential exchange.
- Store issued credentials in a caller-owned `CredentialProvider`.
"""

from __future__ import annotations

from federated_login.directory.errors import FederationError
from federated_login.directory.models import FederatedCredentials, LoginAssertion
from federated_login.directory.protocols import CredentialExchange
from federated_login.flows.config import FederationConfig
from federated_login.observability.logging import get_logger

log = get_logger(__name__)


class CredentialProvider:
    """
    Credential slot owned by the caller and passed into every flow that federates.

    Holds the most recently issued credentials plus the federated identity id per login
    hint, so a repeat login for the same user skips identity resolution. Flows never
    share a provider implicitly; two concurrent logins given the same provider still
    race, and the last federation to complete wins.
    """

    def __init__(self) -> None:
        self.credentials: FederatedCredentials | None = None
        self._identity_ids: dict[str, str] = {}

    def identity_id_for(self, login_hint: str) -> str | None:
        return self._identity_ids.get(login_hint)

    def store(self, login_hint: str, credentials: FederatedCredentials) -> None:
        self._identity_ids[login_hint] = credentials.identity_id
        self.credentials = credentials

    def forget(self, login_hint: str) -> None:
        self._identity_ids.pop(login_hint, None)


def build_login_assertion(username: str, id_token: str, config: FederationConfig) -> LoginAssertion:
    return LoginAssertion(
        identity_pool_id=config.identity_pool_id,
        logins={config.login_provider: id_token},
        login_hint=username,
    )


async def federate(
    username: str,
    id_token: str,
    config: FederationConfig,
    *,
    exchange: CredentialExchange,
    credentials: CredentialProvider,
) -> None:
    """
    Exchange `id_token` for credentials and store them in `credentials`.
    Raises `FederationError` with the exchange's message on rejection.
    """

    assertion = build_login_assertion(username, id_token, config)
    try:
        issued = await exchange.refresh(
            assertion, identity_id=credentials.identity_id_for(username)
        )
    except FederationError as e:
        # Drop the cached identity id; it may be the reason for the rejection.
        credentials.forget(username)
        log.warning("federation.rejected", username=username, code=e.code, error=e.message)
        raise

    credentials.store(username, issued)
    log.info("federation.credentials_issued", username=username, identity_id=issued.identity_id)


# --- Module Notes -----------------------------------------------------------
# Not idempotent with respect to the provider: every successful call overwrites
# `CredentialProvider.credentials`.
