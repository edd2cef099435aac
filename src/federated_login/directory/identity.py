"""
federated_login.directory.identity

HTTP-backed credential exchange (Cognito identity pool).

Responsibilities:
- Resolve the federated identity id for a login assertion (`GetId`).
- Exchange the assertion for temporary credentials (`GetCredentialsForIdentity`).
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import httpx

from federated_login.directory import aws_json
from federated_login.directory.errors import FederationError
from federated_login.directory.models import FederatedCredentials, LoginAssertion

_TARGET_PREFIX = "AWSCognitoIdentityService"


def _federation_error(code: str, message: str) -> FederationError:
    return FederationError(message, code=code)


class CognitoIdentityExchange:
    """
    CredentialExchange implementation. Raises `FederationError` on any rejection.
    """

    def __init__(
        self,
        *,
        http: httpx.AsyncClient,
        region: str,
        endpoint_url: str | None = None,
    ) -> None:
        self._http = http
        self._url = endpoint_url or f"https://cognito-identity.{region}.amazonaws.com/"

    async def _call(self, operation: str, payload: dict[str, Any]) -> dict[str, Any]:
        return await aws_json.call(
            self._http,
            url=self._url,
            target=f"{_TARGET_PREFIX}.{operation}",
            payload=payload,
            error=_federation_error,
        )

    async def get_id(self, assertion: LoginAssertion) -> str:
        body = await self._call(
            "GetId",
            {"IdentityPoolId": assertion.identity_pool_id, "Logins": assertion.logins},
        )
        identity_id = body.get("IdentityId")
        if not identity_id:
            raise FederationError("GetId returned no identity id", code="InvalidResponse")
        return str(identity_id)

    async def refresh(
        self, assertion: LoginAssertion, *, identity_id: str | None = None
    ) -> FederatedCredentials:
        identity_id = identity_id or await self.get_id(assertion)
        body = await self._call(
            "GetCredentialsForIdentity",
            {"IdentityId": identity_id, "Logins": assertion.logins},
        )
        creds = body.get("Credentials") or {}
        if not creds.get("AccessKeyId"):
            raise FederationError("No credentials in exchange response", code="InvalidResponse")
        return FederatedCredentials(
            identity_id=str(body.get("IdentityId") or identity_id),
            access_key_id=str(creds["AccessKeyId"]),
            secret_key=str(creds.get("SecretKey", "")),
            session_token=str(creds.get("SessionToken", "")),
            expiration=_epoch(creds.get("Expiration")),
        )


def _epoch(raw: Any) -> datetime | None:
    if isinstance(raw, (int, float)):
        return datetime.fromtimestamp(raw, tz=UTC)
    return None


# --- Module Notes -----------------------------------------------------------
# Both calls are unauthenticated on the AWS side: the login assertion is the credential.
