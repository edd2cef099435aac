"""
federated_login.flows.config

Per-flow federation configuration.

Responsibilities:
- Immutable pool identifiers + verification policy handed to every flow.
"""

from __future__ import annotations

from dataclasses import dataclass

from federated_login.settings import Settings


@dataclass(frozen=True, slots=True)
class FederationConfig:
    region: str
    user_pool_id: str
    identity_pool_id: str
    mandatory_email_verification: bool = True

    @property
    def login_provider(self) -> str:
        # Key of the login assertion: "{directory host}/{user pool id}".
        return f"cognito-idp.{self.region}.amazonaws.com/{self.user_pool_id}"

    @classmethod
    def from_settings(cls, settings: Settings) -> FederationConfig:
        return cls(
            region=settings.region,
            user_pool_id=settings.user_pool_id,
            identity_pool_id=settings.identity_pool_id,
            mandatory_email_verification=settings.mandatory_email_verification,
        )
