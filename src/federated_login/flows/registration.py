"""
federated_login.flows.registration

Account registration.

Responsibilities:
- Sign up a new directory account.
- Log an auto-confirmed account straight in through the regular login flow.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from federated_login.directory.protocols import CredentialExchange, UserPool
from federated_login.flows.attributes import encode_attributes
from federated_login.flows.config import FederationConfig
from federated_login.flows.federation import CredentialProvider
from federated_login.flows.login import authenticate
from federated_login.flows.outcomes import ConfirmationRequired, Outcome
from federated_login.observability.context import flow_context
from federated_login.observability.logging import get_logger

log = get_logger(__name__)


async def register_user(
    pool: UserPool,
    config: FederationConfig,
    username: str,
    password: str,
    attributes: Mapping[str, Any],
    *,
    exchange: CredentialExchange,
    credentials: CredentialProvider,
    validation_data: Mapping[str, Any] | None = None,
) -> Outcome:
    """
    Raises `DirectoryError` if sign-up is rejected. Otherwise resolves
    `ConfirmationRequired` for unconfirmed accounts, or whatever `authenticate`
    resolves for auto-confirmed ones (same verification gate as any login).
    """

    with flow_context("register", username=username):
        result = await pool.sign_up(
            username,
            password,
            encode_attributes(attributes),
            encode_attributes(validation_data) if validation_data else None,
        )
        if not result.user_confirmed:
            log.info("register.confirmation_required", user_sub=result.user_sub)
            return ConfirmationRequired(user=result.user)

        log.info("register.auto_confirmed", user_sub=result.user_sub)
        return await authenticate(
            username, password, pool, config, exchange=exchange, credentials=credentials
        )
