"""
federated_login.flows.state

Typed state schema for the login graph.

Responsibilities:
- Define the contract between login nodes (inputs/outputs).
"""

from __future__ import annotations

from typing import TypedDict

from federated_login.directory.models import Session
from federated_login.directory.protocols import DirectoryUser
from federated_login.flows.outcomes import Outcome


class LoginState(TypedDict, total=False):
    # Inputs
    username: str
    password: str

    # Produced by the directory steps
    user: DirectoryUser | None
    session: Session | None

    # Terminal result; once set, the graph routes to END.
    outcome: Outcome | None


# --- Module Notes -----------------------------------------------------------
# Node names must not collide with these keys (LangGraph uses keys as channel names).
