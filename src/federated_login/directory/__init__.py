"""
federated_login.directory

Remote collaborator boundary.

Responsibilities:
- Contracts (Protocols) for the user directory and the credential exchange.
- Result variants and error types shared by flows and clients.
- Concrete HTTP clients for a Cognito user pool and identity pool.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Flows depend on `protocols`/`models`/`errors` only; the HTTP clients are wired in
# by the service layer (see `services.auth_service`).
