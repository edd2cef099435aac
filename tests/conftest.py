"""
tests.conftest

In-memory directory / credential-exchange collaborators shared by the flow tests.
"""

from __future__ import annotations

from typing import Any

import pytest

from federated_login.directory.errors import DirectoryError, FederationError
from federated_login.directory.models import (
    AttributeList,
    AuthResult,
    AuthSucceeded,
    CodeDeliveryResult,
    CodeDeliveryStarted,
    FederatedCredentials,
    LoginAssertion,
    Session,
    SignUpResult,
)
from federated_login.flows import CredentialProvider, FederationConfig


def make_session(username: str = "alice") -> Session:
    return Session(
        username=username,
        id_token=f"id-token-{username}",
        access_token=f"access-token-{username}",
        refresh_token="refresh-token",
    )


class FakeUser:
    def __init__(
        self,
        username: str,
        *,
        auth_result: AuthResult | None = None,
        attributes: dict[str, str] | None = None,
        session_error: DirectoryError | None = None,
        attributes_error: DirectoryError | None = None,
        update_error: DirectoryError | None = None,
        password_error: DirectoryError | None = None,
        code_delivery: CodeDeliveryResult | None = None,
    ) -> None:
        self.username = username
        self.session = make_session(username)
        self.auth_result = auth_result or AuthSucceeded(session=self.session)
        self.attributes = dict(attributes or {})
        self.session_error = session_error
        self.attributes_error = attributes_error
        self.update_error = update_error
        self.password_error = password_error
        self.code_delivery = code_delivery or CodeDeliveryStarted(
            delivery_medium="EMAIL", destination="a***@b.com"
        )
        self.calls: list[str] = []
        self.passwords: list[str] = []

    async def authenticate_user(self, password: str) -> AuthResult:
        self.calls.append("authenticate_user")
        self.passwords.append(password)
        return self.auth_result

    async def get_session(self) -> Session:
        self.calls.append("get_session")
        if self.session_error:
            raise self.session_error
        return self.session

    async def get_user_attributes(self) -> AttributeList:
        self.calls.append("get_user_attributes")
        if self.attributes_error:
            raise self.attributes_error
        return [{"Name": k, "Value": v} for k, v in self.attributes.items()]

    async def update_attributes(self, attribute_list: AttributeList) -> None:
        self.calls.append("update_attributes")
        if self.update_error:
            raise self.update_error
        for item in attribute_list:
            self.attributes[item["Name"]] = item["Value"]
            if item["Name"] == "email":
                self.attributes["email_verified"] = "false"

    async def get_attribute_verification_code(self, attribute_name: str) -> CodeDeliveryResult:
        self.calls.append(f"get_attribute_verification_code:{attribute_name}")
        return self.code_delivery

    async def change_password(self, old_password: str, new_password: str) -> str:
        self.calls.append("change_password")
        if self.password_error:
            raise self.password_error
        return "SUCCESS"


class FakePool:
    def __init__(
        self,
        *,
        users: dict[str, FakeUser] | None = None,
        user_confirmed: bool = True,
        sign_up_error: DirectoryError | None = None,
        verify_on_sign_up: bool = True,
    ) -> None:
        self.users = dict(users or {})
        self.user_confirmed = user_confirmed
        self.sign_up_error = sign_up_error
        self.verify_on_sign_up = verify_on_sign_up
        self.sign_ups: list[dict[str, Any]] = []

    def user(self, username: str) -> FakeUser:
        return self.users.setdefault(username, FakeUser(username))

    def user_from_access_token(self, access_token: str) -> FakeUser:
        for user in self.users.values():
            if user.session.access_token == access_token:
                return user
        raise DirectoryError("NotAuthorizedException", "Invalid Access Token")

    async def sign_up(
        self,
        username: str,
        password: str,
        attribute_list: AttributeList,
        validation_data: AttributeList | None = None,
    ) -> SignUpResult:
        self.sign_ups.append(
            {
                "username": username,
                "password": password,
                "attribute_list": attribute_list,
                "validation_data": validation_data,
            }
        )
        if self.sign_up_error:
            raise self.sign_up_error
        user = self.user(username)
        user.attributes.update({item["Name"]: item["Value"] for item in attribute_list})
        if self.verify_on_sign_up:
            user.attributes["email_verified"] = "true"
        return SignUpResult(user=user, user_confirmed=self.user_confirmed, user_sub="sub-1")


class FakeExchange:
    def __init__(self, *, error: FederationError | None = None) -> None:
        self.error = error
        self.requests: list[tuple[LoginAssertion, str | None]] = []

    async def refresh(
        self, assertion: LoginAssertion, *, identity_id: str | None = None
    ) -> FederatedCredentials:
        self.requests.append((assertion, identity_id))
        if self.error:
            raise self.error
        return FederatedCredentials(
            identity_id=identity_id or f"us-east-1:{assertion.login_hint}",
            access_key_id="ASIAEXAMPLE",
            secret_key="secret",
            session_token="session-token",
        )


@pytest.fixture
def config() -> FederationConfig:
    return FederationConfig(
        region="us-east-1",
        user_pool_id="us-east-1_AbCdEf",
        identity_pool_id="us-east-1:11111111-2222-3333-4444-555555555555",
    )


@pytest.fixture
def optional_config(config: FederationConfig) -> FederationConfig:
    return FederationConfig(
        region=config.region,
        user_pool_id=config.user_pool_id,
        identity_pool_id=config.identity_pool_id,
        mandatory_email_verification=False,
    )


@pytest.fixture
def exchange() -> FakeExchange:
    return FakeExchange()


@pytest.fixture
def credentials() -> CredentialProvider:
    return CredentialProvider()
