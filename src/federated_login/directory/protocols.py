"""
federated_login.directory.protocols

Collaborator contracts consumed by the flows.

Responsibilities:
- DirectoryUser: per-account operations.
- UserPool: pool-level operations (user handles, sign-up).
- CredentialExchange: token -> temporary credentials.
"""

from __future__ import annotations

from typing import Protocol

from federated_login.directory.models import (
    AttributeList,
    AuthResult,
    CodeDeliveryResult,
    FederatedCredentials,
    LoginAssertion,
    Session,
    SignUpResult,
)


class DirectoryUser(Protocol):
    """
    Handle to one directory account. Failures of single-completion calls raise
    `DirectoryError`; multi-completion calls return result variants.
    """

    username: str

    async def authenticate_user(self, password: str) -> AuthResult: ...

    async def get_session(self) -> Session: ...

    async def get_user_attributes(self) -> AttributeList: ...

    async def update_attributes(self, attribute_list: AttributeList) -> None: ...

    async def get_attribute_verification_code(self, attribute_name: str) -> CodeDeliveryResult: ...

    async def change_password(self, old_password: str, new_password: str) -> str: ...


class UserPool(Protocol):
    def user(self, username: str) -> DirectoryUser: ...

    async def sign_up(
        self,
        username: str,
        password: str,
        attribute_list: AttributeList,
        validation_data: AttributeList | None = None,
    ) -> SignUpResult: ...


class CredentialExchange(Protocol):
    async def refresh(
        self, assertion: LoginAssertion, *, identity_id: str | None = None
    ) -> FederatedCredentials:
        """
        Raises `FederationError` when the exchange rejects the assertion.
        """
        ...


class BearerUserPool(UserPool, Protocol):
    def user_from_access_token(self, access_token: str) -> DirectoryUser:
        """
        Rebuild a user handle from a bearer access token. Raises `DirectoryError`.
        """
        ...
