"""
federated_login.flows

Authentication / federation flows.

Responsibilities:
- Login (directory auth -> session -> federation -> email verification gate).
- Registration, attribute updates and password change.
- One terminal Outcome per flow invocation.
"""

from federated_login.flows.config import FederationConfig
from federated_login.flows.federation import CredentialProvider
from federated_login.flows.login import authenticate, perform_login
from federated_login.flows.profile import change_password, update_attributes
from federated_login.flows.registration import register_user
from federated_login.flows.verification import (
    email_verification_is_mandatory,
    login_or_verify_email,
    send_attribute_verification_code,
)

__all__ = [
    "CredentialProvider",
    "FederationConfig",
    "authenticate",
    "change_password",
    "email_verification_is_mandatory",
    "login_or_verify_email",
    "perform_login",
    "register_user",
    "send_attribute_verification_code",
    "update_attributes",
]


# --- Module Notes -----------------------------------------------------------
# Callers route the returned Outcome themselves (the HTTP layer renders it; see
# `api.routers.auth`).
