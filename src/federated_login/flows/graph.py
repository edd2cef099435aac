from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from federated_login.directory.protocols import CredentialExchange, UserPool
from federated_login.flows.config import FederationConfig
from federated_login.flows.federation import CredentialProvider
from federated_login.flows.nodes import (
    authenticate_user_node,
    federate_identity_node,
    fetch_session_node,
    route_on_outcome,
    verify_email_node,
)
from federated_login.flows.state import LoginState

NodeFn = Callable[[LoginState], Awaitable[dict[str, Any]]]

# Strictly linear: each step needs the previous step's result.
STEPS = ("authenticate_user", "fetch_session", "federate_identity", "verify_email")


def build_login_graph(
    *,
    pool: UserPool | None,
    config: FederationConfig,
    exchange: CredentialExchange,
    credentials: CredentialProvider,
    entry: str = "authenticate_user",
):
    """
    Returns a compiled LangGraph runnable for the login sequence, starting at `entry`.
    Any node that writes `outcome` ends the run.
    """

    try:
        from langgraph.graph import END, StateGraph  # type: ignore[import-not-found]
    except ImportError as e:  # pragma: no cover
        raise RuntimeError("LangGraph is not available. Install the package dependencies.") from e

    if entry not in STEPS:
        raise ValueError(f"unknown login step: {entry}")

    steps = STEPS[STEPS.index(entry) :]
    if "authenticate_user" in steps and pool is None:
        raise ValueError("a user pool is required to authenticate")

    nodes: dict[str, NodeFn] = {
        "authenticate_user": _bind(authenticate_user_node, pool=pool),
        "fetch_session": fetch_session_node,
        "federate_identity": _bind(
            federate_identity_node, config=config, exchange=exchange, credentials=credentials
        ),
        "verify_email": _bind(verify_email_node, config=config),
    }

    graph = StateGraph(LoginState)
    for name in steps:
        graph.add_node(name, nodes[name])
    graph.set_entry_point(entry)

    for current, following in zip(steps, steps[1:]):
        graph.add_conditional_edges(
            current,
            route_on_outcome,
            {"next": following, "finish": END},
        )
    graph.add_edge(steps[-1], END)

    return graph.compile()


def _bind(fn: Callable[..., Awaitable[dict[str, Any]]], **deps: Any) -> NodeFn:
    async def _wrapped(state: LoginState) -> dict[str, Any]:
        return await fn(state, **deps)

    return _wrapped
