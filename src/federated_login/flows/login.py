"""
federated_login.flows.login

Login entry points.

Responsibilities:
- `authenticate`: full login from username + password.
- `perform_login`: continuation for an already-authenticated user (session ->
  federation -> verification gate).
"""

from __future__ import annotations

from federated_login.directory.protocols import CredentialExchange, DirectoryUser, UserPool
from federated_login.flows.config import FederationConfig
from federated_login.flows.federation import CredentialProvider
from federated_login.flows.graph import build_login_graph
from federated_login.flows.outcomes import Outcome
from federated_login.flows.state import LoginState
from federated_login.observability.context import flow_context
from federated_login.observability.logging import get_logger

log = get_logger(__name__)


async def authenticate(
    username: str,
    password: str,
    pool: UserPool,
    config: FederationConfig,
    *,
    exchange: CredentialExchange,
    credentials: CredentialProvider,
) -> Outcome:
    """
    Authenticate against the directory, federate the identity token into
    `credentials`, then apply the email verification gate.

    Possible outcomes:
    - LoggedIn: authenticated, federated, email verified (or verification optional)
    - LoginFailure: rejected by the directory, the session fetch or the exchange
    - ConfirmationRequired: account exists but is not confirmed
    - MfaRequired / NewPasswordRequired: the directory wants more input
    - EmailVerificationRequired / EmailVerificationFailed: see `flows.verification`

    Never raises for remote failures.
    """

    with flow_context("login", username=username):
        graph = build_login_graph(
            pool=pool, config=config, exchange=exchange, credentials=credentials
        )
        state: LoginState = {"username": username, "password": password}
        return _outcome(await graph.ainvoke(state))


async def perform_login(
    user: DirectoryUser | None,
    config: FederationConfig,
    *,
    exchange: CredentialExchange,
    credentials: CredentialProvider,
) -> Outcome:
    # Public entry points always supply a user; None here is a caller bug.
    if user is None:
        raise ValueError("user is null")

    with flow_context("login", username=user.username):
        graph = build_login_graph(
            pool=None,
            config=config,
            exchange=exchange,
            credentials=credentials,
            entry="fetch_session",
        )
        state: LoginState = {"username": user.username, "user": user}
        return _outcome(await graph.ainvoke(state))


def _outcome(final_state: LoginState) -> Outcome:
    outcome = final_state.get("outcome")
    if outcome is None:
        raise RuntimeError("login graph finished without an outcome")
    log.info("login.finished", outcome=outcome.kind)
    return outcome
