"""
federated_login.directory.aws_json

Minimal AWS JSON 1.1 transport over httpx.

Responsibilities:
- POST an operation to a regional endpoint with the `X-Amz-Target` header.
- Turn error bodies (`__type` + `message`) into the caller's exception type.

Note:
- Only unauthenticated (token-based) operations are used, so no SigV4 signing happens here.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx

ErrorFactory = Callable[[str, str], Exception]

CONTENT_TYPE = "application/x-amz-json-1.1"


async def call(
    http: httpx.AsyncClient,
    *,
    url: str,
    target: str,
    payload: dict[str, Any],
    error: ErrorFactory,
) -> dict[str, Any]:
    try:
        r = await http.post(
            url,
            headers={"Content-Type": CONTENT_TYPE, "X-Amz-Target": target},
            json=payload,
        )
    except httpx.HTTPError as e:
        raise error("NetworkError", str(e) or e.__class__.__name__) from e

    body = _json_body(r)
    if r.is_error:
        raise error(_error_code(r, body), _error_message(r, body))
    return body


def _json_body(r: httpx.Response) -> dict[str, Any]:
    if not r.content:
        return {}
    try:
        body = r.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _error_code(r: httpx.Response, body: dict[str, Any]) -> str:
    # `__type` may be namespaced: "com.amazonaws.cognito...#UserNotConfirmedException".
    raw = str(body.get("__type") or r.headers.get("x-amzn-errortype", "")).split(":")[0]
    return raw.rsplit("#", 1)[-1] or f"HTTP{r.status_code}"


def _error_message(r: httpx.Response, body: dict[str, Any]) -> str:
    return str(body.get("message") or body.get("Message") or r.reason_phrase or "Unknown error")


# --- Module Notes -----------------------------------------------------------
# Timeouts/retries belong to the httpx.AsyncClient passed in (see services.auth_service).
