"""
federated_login.api

HTTP API package (FastAPI).

Responsibilities:
- App factory, dependencies and routers.
"""

# Package marker.
