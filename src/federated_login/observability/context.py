"""
federated_login.observability.context

Flow-scoped logging context.

Responsibilities:
- Tag every log line emitted during a flow with the flow name and a flow id.
- Restore the previous context on exit (flows nest: registration runs login).
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator
from contextlib import contextmanager

import structlog


@contextmanager
def flow_context(flow: str, **values: str) -> Iterator[str]:
    flow_id = str(uuid.uuid4())
    # bound_contextvars resets to the previous values on exit, so nested flows are safe.
    with structlog.contextvars.bound_contextvars(flow=flow, flow_id=flow_id, **values):
        yield flow_id


# --- Module Notes -----------------------------------------------------------
# contextvars are per-task under asyncio, so two flows awaited concurrently keep
# separate contexts.
