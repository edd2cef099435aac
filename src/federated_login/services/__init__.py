"""
federated_login.services

Service layer.

Responsibilities:
- Compose settings, HTTP clients and flows behind one object used by the API.
"""

# Package marker.
