"""
federated_login.api.routers.auth

Login, registration and profile endpoints.

Responsibilities:
- Run a flow per request and render its Outcome as JSON (the API is the flows'
  dispatcher).
- Map directory rejections without an Outcome to HTTP errors, message verbatim.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_401_UNAUTHORIZED

from federated_login.api.deps import access_token, auth_service
from federated_login.directory.errors import DirectoryError
from federated_login.services.auth_service import AuthService, FlowResult

router = APIRouter(prefix="/v1/auth", tags=["auth"])

# Token problems on bearer endpoints are authentication errors, not bad requests.
_UNAUTHORIZED_CODES = frozenset({"NotAuthorizedException"})


class LoginRequest(BaseModel):
    username: str = Field(min_length=1, max_length=128)
    password: str = Field(min_length=1, max_length=256)


class RegisterRequest(LoginRequest):
    attributes: dict[str, str | int | float | bool] = Field(default_factory=dict)


class AttributesRequest(BaseModel):
    attributes: dict[str, str | int | float | bool]


class ChangePasswordRequest(BaseModel):
    previous_password: str = Field(min_length=1, max_length=256)
    proposed_password: str = Field(min_length=1, max_length=256)


class SessionTokens(BaseModel):
    id_token: str | None
    access_token: str
    refresh_token: str | None


class CredentialsResponse(BaseModel):
    identity_id: str
    access_key_id: str
    secret_key: str
    session_token: str
    expiration: datetime | None


class OutcomeResponse(BaseModel):
    kind: str
    username: str | None = None
    attributes: dict[str, str] | None = None
    reason: str | None = None
    delivery_medium: str | None = None
    session: SessionTokens | None = None
    credentials: CredentialsResponse | None = None


class ChangePasswordResponse(BaseModel):
    status: str


def render_outcome(result: FlowResult) -> OutcomeResponse:
    outcome = result.outcome
    user = getattr(outcome, "user", None)
    body: dict[str, Any] = {
        "kind": outcome.kind,
        "username": user.username if user is not None else None,
        "attributes": getattr(outcome, "attributes", None),
        "reason": getattr(outcome, "reason", None),
        "delivery_medium": getattr(outcome, "delivery_medium", None),
    }
    if result.session is not None:
        body["session"] = SessionTokens(
            id_token=result.session.id_token,
            access_token=result.session.access_token,
            refresh_token=result.session.refresh_token,
        )
    if result.credentials is not None and outcome.kind == "logged_in":
        c = result.credentials
        body["credentials"] = CredentialsResponse(
            identity_id=c.identity_id,
            access_key_id=c.access_key_id,
            secret_key=c.secret_key,
            session_token=c.session_token,
            expiration=c.expiration,
        )
    return OutcomeResponse(**body)


def _directory_http_error(e: DirectoryError) -> HTTPException:
    status = HTTP_401_UNAUTHORIZED if e.code in _UNAUTHORIZED_CODES else HTTP_400_BAD_REQUEST
    return HTTPException(status_code=status, detail=e.message)


@router.post("/login", response_model=OutcomeResponse)
async def login(
    body: LoginRequest,
    svc: AuthService = Depends(auth_service),
) -> OutcomeResponse:
    # Login always resolves to an Outcome, including failures.
    result = await svc.login(username=body.username, password=body.password)
    return render_outcome(result)


@router.post("/register", response_model=OutcomeResponse)
async def register(
    body: RegisterRequest,
    svc: AuthService = Depends(auth_service),
) -> OutcomeResponse:
    try:
        result = await svc.register(
            username=body.username, password=body.password, attributes=body.attributes
        )
    except DirectoryError as e:
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail=e.message) from e
    return render_outcome(result)


@router.put("/attributes", response_model=OutcomeResponse)
async def put_attributes(
    body: AttributesRequest,
    token: str = Depends(access_token),
    svc: AuthService = Depends(auth_service),
) -> OutcomeResponse:
    try:
        result = await svc.update_attributes(access_token=token, attributes=body.attributes)
    except DirectoryError as e:
        raise _directory_http_error(e) from e
    return render_outcome(result)


@router.post("/password", response_model=ChangePasswordResponse)
async def post_password(
    body: ChangePasswordRequest,
    token: str = Depends(access_token),
    svc: AuthService = Depends(auth_service),
) -> ChangePasswordResponse:
    try:
        status = await svc.change_password(
            access_token=token,
            previous_password=body.previous_password,
            proposed_password=body.proposed_password,
        )
    except DirectoryError as e:
        raise _directory_http_error(e) from e
    return ChangePasswordResponse(status=status)


# --- Module Notes -----------------------------------------------------------
# Credentials are only rendered for `logged_in`; a user still pending email
# verification gets tokens (to verify) but no federated credentials.
