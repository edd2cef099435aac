"""
federated_login.flows.outcomes

Terminal results of the flows.

Responsibilities:
- One tagged variant per terminal state; every flow invocation yields exactly one.
- `kind` gives a stable snake_case tag for dispatchers/serializers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from federated_login.directory.protocols import DirectoryUser


@dataclass(frozen=True, slots=True)
class LoggedIn:
    kind: ClassVar[str] = "logged_in"

    user: DirectoryUser
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class LoginFailure:
    kind: ClassVar[str] = "login_failure"

    user: DirectoryUser | None
    reason: str


@dataclass(frozen=True, slots=True)
class MfaRequired:
    kind: ClassVar[str] = "mfa_required"

    user: DirectoryUser


@dataclass(frozen=True, slots=True)
class NewPasswordRequired:
    kind: ClassVar[str] = "new_password_required"

    user: DirectoryUser


@dataclass(frozen=True, slots=True)
class ConfirmationRequired:
    kind: ClassVar[str] = "confirmation_required"

    user: DirectoryUser


@dataclass(frozen=True, slots=True)
class EmailVerificationRequired:
    kind: ClassVar[str] = "email_verification_required"

    user: DirectoryUser
    attributes: dict[str, str]
    delivery_medium: str | None = None


@dataclass(frozen=True, slots=True)
class EmailVerificationFailed:
    kind: ClassVar[str] = "email_verification_failed"

    user: DirectoryUser
    attributes: dict[str, str]
    reason: str


@dataclass(frozen=True, slots=True)
class AttributesUpdated:
    kind: ClassVar[str] = "attributes_updated"

    attributes: dict[str, str]


Outcome = (
    LoggedIn
    | LoginFailure
    | MfaRequired
    | NewPasswordRequired
    | ConfirmationRequired
    | EmailVerificationRequired
    | EmailVerificationFailed
    | AttributesUpdated
)


# --- Module Notes -----------------------------------------------------------
# MFA / new password / confirmation are not errors: the caller collects the missing
# input and starts a fresh flow.
