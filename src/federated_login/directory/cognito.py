"""
federated_login.directory.cognito

HTTP-backed user directory (Cognito user pool).

Responsibilities:
- `CognitoIdpClient`: one method per user-pool operation.
- `CognitoUser`: the DirectoryUser handle, owning its cached session.
- `CognitoUserPool`: user handles and sign-up.
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from federated_login.directory import aws_json
from federated_login.directory.errors import DirectoryError
from federated_login.directory.models import (
    AttributeList,
    AuthFailed,
    AuthResult,
    AuthSucceeded,
    CodeDeliveryFailed,
    CodeDeliveryNotNeeded,
    CodeDeliveryResult,
    CodeDeliveryStarted,
    MfaChallenge,
    NewPasswordChallenge,
    Session,
    SignUpResult,
)
from federated_login.directory.tokens import token_username
from federated_login.observability.logging import get_logger

log = get_logger(__name__)

_TARGET_PREFIX = "AWSCognitoIdentityProviderService"
_MFA_CHALLENGES = frozenset({"SMS_MFA", "SOFTWARE_TOKEN_MFA"})


class CognitoIdpClient:
    """
    Thin client for the user-pool JSON API. Every method raises `DirectoryError`.
    """

    def __init__(
        self,
        *,
        http: httpx.AsyncClient,
        region: str,
        client_id: str,
        endpoint_url: str | None = None,
    ) -> None:
        self._http = http
        self._client_id = client_id
        self._url = endpoint_url or f"https://cognito-idp.{region}.amazonaws.com/"

    async def _call(self, operation: str, payload: dict[str, Any]) -> dict[str, Any]:
        return await aws_json.call(
            self._http,
            url=self._url,
            target=f"{_TARGET_PREFIX}.{operation}",
            payload=payload,
            error=DirectoryError,
        )

    async def initiate_auth(self, *, username: str, password: str) -> dict[str, Any]:
        return await self._call(
            "InitiateAuth",
            {
                "AuthFlow": "USER_PASSWORD_AUTH",
                "ClientId": self._client_id,
                "AuthParameters": {"USERNAME": username, "PASSWORD": password},
            },
        )

    async def refresh_tokens(self, *, refresh_token: str) -> dict[str, Any]:
        return await self._call(
            "InitiateAuth",
            {
                "AuthFlow": "REFRESH_TOKEN_AUTH",
                "ClientId": self._client_id,
                "AuthParameters": {"REFRESH_TOKEN": refresh_token},
            },
        )

    async def get_user(self, *, access_token: str) -> dict[str, Any]:
        return await self._call("GetUser", {"AccessToken": access_token})

    async def update_user_attributes(
        self, *, access_token: str, attribute_list: AttributeList
    ) -> dict[str, Any]:
        return await self._call(
            "UpdateUserAttributes",
            {"AccessToken": access_token, "UserAttributes": attribute_list},
        )

    async def get_user_attribute_verification_code(
        self, *, access_token: str, attribute_name: str
    ) -> dict[str, Any]:
        return await self._call(
            "GetUserAttributeVerificationCode",
            {"AccessToken": access_token, "AttributeName": attribute_name},
        )

    async def change_password(
        self, *, access_token: str, previous_password: str, proposed_password: str
    ) -> dict[str, Any]:
        return await self._call(
            "ChangePassword",
            {
                "AccessToken": access_token,
                "PreviousPassword": previous_password,
                "ProposedPassword": proposed_password,
            },
        )

    async def sign_up(
        self,
        *,
        username: str,
        password: str,
        attribute_list: AttributeList,
        validation_data: AttributeList | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "ClientId": self._client_id,
            "Username": username,
            "Password": password,
            "UserAttributes": attribute_list,
        }
        if validation_data:
            payload["ValidationData"] = validation_data
        return await self._call("SignUp", payload)


class CognitoUser:
    """
    DirectoryUser backed by `CognitoIdpClient`. Holds the session of its last
    successful authentication (or refresh).
    """

    def __init__(
        self,
        *,
        username: str,
        client: CognitoIdpClient,
        session: Session | None = None,
    ) -> None:
        self.username = username
        self._client = client
        self._session = session

    async def authenticate_user(self, password: str) -> AuthResult:
        try:
            body = await self._client.initiate_auth(username=self.username, password=password)
        except DirectoryError as e:
            return AuthFailed(error=e)

        result = body.get("AuthenticationResult")
        if result:
            try:
                self._session = self._session_from(result)
            except DirectoryError as e:
                return AuthFailed(error=e)
            # The pool may resolve an alias (email) to the canonical username.
            self.username = self._session.username
            return AuthSucceeded(session=self._session)

        challenge = str(body.get("ChallengeName", ""))
        params = body.get("ChallengeParameters") or {}
        if challenge in _MFA_CHALLENGES:
            return MfaChallenge(challenge_name=challenge, challenge_session=body.get("Session"))
        if challenge == "NEW_PASSWORD_REQUIRED":
            return NewPasswordChallenge(
                challenge_session=body.get("Session"),
                required_attributes=tuple(_json_list(params.get("requiredAttributes"))),
            )
        return AuthFailed(
            error=DirectoryError("UnsupportedChallenge", f"Unsupported challenge: {challenge or 'none'}")
        )

    async def get_session(self) -> Session:
        if self._session is None:
            raise DirectoryError("NotAuthorizedException", "User is not authenticated")
        if self._session.is_valid():
            return self._session
        refresh_token = self._session.refresh_token
        if not refresh_token:
            raise DirectoryError("NotAuthorizedException", "Session has expired")

        body = await self._client.refresh_tokens(refresh_token=refresh_token)
        # Refresh responses do not include a new refresh token.
        self._session = self._session_from(
            body.get("AuthenticationResult") or {}, refresh_token=refresh_token
        )
        log.info("directory.session_refreshed", username=self.username)
        return self._session

    async def get_user_attributes(self) -> AttributeList:
        session = await self.get_session()
        body = await self._client.get_user(access_token=session.access_token)
        return list(body.get("UserAttributes", []))

    async def update_attributes(self, attribute_list: AttributeList) -> None:
        session = await self.get_session()
        await self._client.update_user_attributes(
            access_token=session.access_token, attribute_list=attribute_list
        )

    async def get_attribute_verification_code(self, attribute_name: str) -> CodeDeliveryResult:
        try:
            session = await self.get_session()
            body = await self._client.get_user_attribute_verification_code(
                access_token=session.access_token, attribute_name=attribute_name
            )
        except DirectoryError as e:
            return CodeDeliveryFailed(error=e)

        details = body.get("CodeDeliveryDetails")
        if not details:
            return CodeDeliveryNotNeeded()
        return CodeDeliveryStarted(
            delivery_medium=details.get("DeliveryMedium"),
            destination=details.get("Destination"),
        )

    async def change_password(self, old_password: str, new_password: str) -> str:
        session = await self.get_session()
        await self._client.change_password(
            access_token=session.access_token,
            previous_password=old_password,
            proposed_password=new_password,
        )
        return "SUCCESS"

    def _session_from(self, result: dict[str, Any], *, refresh_token: str | None = None) -> Session:
        access_token = result.get("AccessToken")
        if not access_token:
            raise DirectoryError("InvalidResponse", "Authentication result has no access token")
        return Session(
            username=token_username(access_token) or self.username,
            id_token=result.get("IdToken"),
            access_token=access_token,
            refresh_token=result.get("RefreshToken") or refresh_token,
        )


class CognitoUserPool:
    def __init__(self, *, client: CognitoIdpClient, user_pool_id: str) -> None:
        self._client = client
        self.user_pool_id = user_pool_id

    def user(self, username: str) -> CognitoUser:
        return CognitoUser(username=username, client=self._client)

    def user_from_access_token(self, access_token: str) -> CognitoUser:
        """
        Rebuild a user handle from a bearer access token (no id/refresh token).
        """

        username = token_username(access_token)
        if not username:
            raise DirectoryError("NotAuthorizedException", "Access token has no username")
        session = Session(username=username, id_token=None, access_token=access_token)
        return CognitoUser(username=username, client=self._client, session=session)

    async def sign_up(
        self,
        username: str,
        password: str,
        attribute_list: AttributeList,
        validation_data: AttributeList | None = None,
    ) -> SignUpResult:
        body = await self._client.sign_up(
            username=username,
            password=password,
            attribute_list=attribute_list,
            validation_data=validation_data,
        )
        return SignUpResult(
            user=self.user(username),
            user_confirmed=bool(body.get("UserConfirmed", False)),
            user_sub=body.get("UserSub"),
        )


def _json_list(raw: Any) -> list[str]:
    # Challenge parameters encode lists as JSON strings, e.g. '["userAttributes.email"]'.
    if isinstance(raw, list):
        return [str(x) for x in raw]
    if isinstance(raw, str) and raw:
        try:
            parsed = json.loads(raw)
        except ValueError:
            return []
        return [str(x) for x in parsed] if isinstance(parsed, list) else []
    return []


# --- Module Notes -----------------------------------------------------------
# USER_PASSWORD_AUTH must be enabled on the app client. SRP would avoid sending the
# password but needs the big-integer handshake, which this client does not implement.
