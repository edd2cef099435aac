"""
federated_login.services.auth_service

Composition root for the flows.

Responsibilities:
- Build the directory/exchange clients from Settings.
- Give every login its own CredentialProvider and return the issued credentials
  next to the Outcome.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from federated_login.directory.cognito import CognitoIdpClient, CognitoUserPool
from federated_login.directory.errors import DirectoryError
from federated_login.directory.identity import CognitoIdentityExchange
from federated_login.directory.models import FederatedCredentials, Session
from federated_login.directory.protocols import BearerUserPool, CredentialExchange
from federated_login.flows import (
    CredentialProvider,
    FederationConfig,
    authenticate,
    change_password,
    register_user,
    update_attributes,
)
from federated_login.flows.outcomes import Outcome
from federated_login.observability.logging import get_logger
from federated_login.settings import Settings

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class FlowResult:
    outcome: Outcome
    credentials: FederatedCredentials | None = None
    session: Session | None = None


class AuthService:
    def __init__(
        self,
        *,
        pool: BearerUserPool,
        exchange: CredentialExchange,
        config: FederationConfig,
    ) -> None:
        self._pool = pool
        self._exchange = exchange
        self._config = config

    @classmethod
    def from_settings(cls, *, settings: Settings, http: httpx.AsyncClient) -> AuthService:
        idp = CognitoIdpClient(
            http=http,
            region=settings.region,
            client_id=settings.client_id,
            endpoint_url=settings.idp_endpoint_url,
        )
        return cls(
            pool=CognitoUserPool(client=idp, user_pool_id=settings.user_pool_id),
            exchange=CognitoIdentityExchange(
                http=http,
                region=settings.region,
                endpoint_url=settings.identity_endpoint_url,
            ),
            config=FederationConfig.from_settings(settings),
        )

    async def login(self, *, username: str, password: str) -> FlowResult:
        provider = CredentialProvider()
        outcome = await authenticate(
            username,
            password,
            self._pool,
            self._config,
            exchange=self._exchange,
            credentials=provider,
        )
        return await self._result(outcome, provider)

    async def register(
        self, *, username: str, password: str, attributes: Mapping[str, Any]
    ) -> FlowResult:
        provider = CredentialProvider()
        outcome = await register_user(
            self._pool,
            self._config,
            username,
            password,
            attributes,
            exchange=self._exchange,
            credentials=provider,
        )
        return await self._result(outcome, provider)

    async def update_attributes(
        self, *, access_token: str, attributes: Mapping[str, Any]
    ) -> FlowResult:
        user = self._pool.user_from_access_token(access_token)
        return FlowResult(outcome=await update_attributes(user, attributes, self._config))

    async def change_password(
        self, *, access_token: str, previous_password: str, proposed_password: str
    ) -> str:
        user = self._pool.user_from_access_token(access_token)
        return await change_password(user, previous_password, proposed_password)

    async def _result(self, outcome: Outcome, provider: CredentialProvider) -> FlowResult:
        session: Session | None = None
        user = getattr(outcome, "user", None)
        # Only hand tokens back once the user is past directory authentication.
        if user is not None and outcome.kind in ("logged_in", "email_verification_required"):
            try:
                session = await user.get_session()
            except DirectoryError as e:
                # The flow already finished; its outcome is returned without tokens.
                log.warning("service.session_unavailable", username=user.username, code=e.code)
        return FlowResult(outcome=outcome, credentials=provider.credentials, session=session)


# --- Module Notes -----------------------------------------------------------
# One CredentialProvider per flow keeps concurrent logins from overwriting each
# other's federated credentials.
