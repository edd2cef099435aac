from __future__ import annotations

from typing import Any

from federated_login.directory.errors import DirectoryError, FederationError
from federated_login.directory.models import (
    AuthFailed,
    AuthSucceeded,
    MfaChallenge,
    NewPasswordChallenge,
)
from federated_login.directory.protocols import CredentialExchange, UserPool
from federated_login.flows.config import FederationConfig
from federated_login.flows.federation import CredentialProvider, federate
from federated_login.flows.outcomes import (
    ConfirmationRequired,
    LoginFailure,
    MfaRequired,
    NewPasswordRequired,
)
from federated_login.flows.state import LoginState
from federated_login.flows.verification import login_or_verify_email
from federated_login.observability.logging import get_logger

log = get_logger(__name__)

USER_NOT_CONFIRMED = "UserNotConfirmedException"


async def authenticate_user_node(state: LoginState, *, pool: UserPool) -> dict[str, Any]:
    user = pool.user(state["username"])
    result = await user.authenticate_user(state["password"])

    match result:
        case AuthSucceeded():
            log.info("login.directory_authenticated", username=user.username)
            return {"user": user}
        case AuthFailed(error=error) if error.code == USER_NOT_CONFIRMED:
            log.info("login.confirmation_required", username=user.username)
            return {"user": user, "outcome": ConfirmationRequired(user=user)}
        case AuthFailed(error=error):
            log.info("login.directory_rejected", username=user.username, code=error.code)
            return {"user": user, "outcome": LoginFailure(user=user, reason=error.message)}
        case MfaChallenge(challenge_name=challenge):
            log.info("login.mfa_required", username=user.username, challenge=challenge)
            return {"user": user, "outcome": MfaRequired(user=user)}
        case NewPasswordChallenge():
            log.info("login.new_password_required", username=user.username)
            return {"user": user, "outcome": NewPasswordRequired(user=user)}
    raise TypeError(f"unexpected authentication result: {result!r}")


async def fetch_session_node(state: LoginState) -> dict[str, Any]:
    user = state.get("user")
    if user is None:
        raise ValueError("user is null")

    try:
        session = await user.get_session()
    except DirectoryError as e:
        log.info("login.session_failed", username=user.username, code=e.code)
        return {"outcome": LoginFailure(user=user, reason=e.message)}
    return {"session": session}


async def federate_identity_node(
    state: LoginState,
    *,
    config: FederationConfig,
    exchange: CredentialExchange,
    credentials: CredentialProvider,
) -> dict[str, Any]:
    user = state["user"]
    session = state["session"]
    if user is None or session is None:
        raise ValueError("federation requires an authenticated session")
    if not session.id_token:
        return {"outcome": LoginFailure(user=user, reason="Session has no identity token")}

    try:
        await federate(
            user.username,
            session.id_token,
            config,
            exchange=exchange,
            credentials=credentials,
        )
    except FederationError as e:
        return {"outcome": LoginFailure(user=user, reason=e.message)}
    log.info("login.federated", username=user.username)
    return {}


async def verify_email_node(state: LoginState, *, config: FederationConfig) -> dict[str, Any]:
    user = state["user"]
    if user is None:
        raise ValueError("user is null")

    try:
        outcome = await login_or_verify_email(user, config)
    except DirectoryError as e:
        # The gate raises on attribute fetch failure; login still ends in an Outcome.
        log.warning("login.attributes_failed", username=user.username, code=e.code)
        outcome = LoginFailure(user=user, reason=e.message)
    return {"outcome": outcome}


def route_on_outcome(state: LoginState) -> str:
    if state.get("outcome") is not None:
        return "finish"
    return "next"
