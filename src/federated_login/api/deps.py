"""
federated_login.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide the AuthService for a request.
- Extract bearer access tokens.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.status import HTTP_401_UNAUTHORIZED

from federated_login.services.auth_service import AuthService

_bearer = HTTPBearer(auto_error=False)


def auth_service(request: Request) -> AuthService:
    # The httpx client is created in the app lifespan (see `api.app.create_app`).
    return AuthService.from_settings(
        settings=request.app.state.settings,
        http=request.app.state.http,
    )


def access_token(creds: HTTPAuthorizationCredentials | None = Depends(_bearer)) -> str:
    if creds is None or not creds.credentials:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    return creds.credentials
