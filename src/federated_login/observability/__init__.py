"""
federated_login.observability

Observability package.

Responsibilities:
- Structured logging configuration.
- Request- and flow-scoped logging context.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Flows only import `get_logger` and `flow_context`; configuration happens at app startup.
