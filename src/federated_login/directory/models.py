"""
federated_login.directory.models

Value types exchanged with the directory and the credential exchange.

Responsibilities:
- Session (proof of directory authentication).
- Tagged result variants for calls with several named completions.
- Login assertion and federated credentials for the exchange.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from federated_login.directory.errors import DirectoryError
from federated_login.directory.tokens import token_expired

if TYPE_CHECKING:
    from federated_login.directory.protocols import DirectoryUser

# Wire form of user attributes: [{"Name": ..., "Value": ...}, ...]
AttributeList = list[dict[str, str]]


@dataclass(frozen=True, slots=True)
class Session:
    """
    Immutable result of one successful directory authentication.
    """

    username: str
    id_token: str | None
    access_token: str
    refresh_token: str | None = field(default=None, repr=False)

    def is_valid(self, *, now: datetime | None = None) -> bool:
        if token_expired(self.access_token, now=now):
            return False
        return self.id_token is None or not token_expired(self.id_token, now=now)


# --- authenticate_user completions ------------------------------------------


@dataclass(frozen=True, slots=True)
class AuthSucceeded:
    session: Session


@dataclass(frozen=True, slots=True)
class AuthFailed:
    error: DirectoryError


@dataclass(frozen=True, slots=True)
class MfaChallenge:
    challenge_name: str
    challenge_session: str | None = field(default=None, repr=False)


@dataclass(frozen=True, slots=True)
class NewPasswordChallenge:
    challenge_session: str | None = field(default=None, repr=False)
    required_attributes: tuple[str, ...] = ()


AuthResult = AuthSucceeded | AuthFailed | MfaChallenge | NewPasswordChallenge


# --- get_attribute_verification_code completions ----------------------------


@dataclass(frozen=True, slots=True)
class CodeDeliveryStarted:
    # The user must now enter the code they received.
    delivery_medium: str | None = None
    destination: str | None = None


@dataclass(frozen=True, slots=True)
class CodeDeliveryNotNeeded:
    pass


@dataclass(frozen=True, slots=True)
class CodeDeliveryFailed:
    error: DirectoryError


CodeDeliveryResult = CodeDeliveryStarted | CodeDeliveryNotNeeded | CodeDeliveryFailed


@dataclass(frozen=True, slots=True)
class SignUpResult:
    user: DirectoryUser
    user_confirmed: bool
    user_sub: str | None = None


# --- credential exchange ----------------------------------------------------


@dataclass(frozen=True, slots=True)
class LoginAssertion:
    identity_pool_id: str
    logins: dict[str, str] = field(repr=False)
    # Disambiguates the identity when several logins map to one federated identity.
    login_hint: str = ""


@dataclass(frozen=True, slots=True)
class FederatedCredentials:
    identity_id: str
    access_key_id: str
    secret_key: str = field(repr=False)
    session_token: str = field(repr=False)
    expiration: datetime | None = None


# --- Module Notes -----------------------------------------------------------
# Result variants replace the directory SDK's named callbacks (onSuccess, onFailure,
# mfaRequired, ...); flows branch with `match` on the returned value.
