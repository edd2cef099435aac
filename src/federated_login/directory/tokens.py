"""
federated_login.directory.tokens

Helpers for reading directory-issued JWTs.

Responsibilities:
- Read claims (exp, username) from identity/access tokens.

Note:
- Signatures are NOT verified here. Tokens arrive straight from the directory over TLS
  and are only inspected for expiry and the username claim; any service that trusts
  them for authorization must verify against the pool's JWKS.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import jwt
from jwt import InvalidTokenError


def token_claims(token: str) -> dict[str, Any]:
    try:
        return jwt.decode(token, options={"verify_signature": False})
    except InvalidTokenError:
        return {}


def token_expired(token: str, *, now: datetime | None = None) -> bool:
    exp = token_claims(token).get("exp")
    if not isinstance(exp, (int, float)):
        # Unreadable or exp-less tokens are treated as expired.
        return True
    now = now or datetime.now(tz=UTC)
    return now.timestamp() >= float(exp)


def token_username(token: str) -> str | None:
    claims = token_claims(token)
    # Access tokens carry `username`, identity tokens `cognito:username`.
    value = claims.get("username") or claims.get("cognito:username")
    return str(value) if value else None
