"""
federated_login.directory.errors

Error types raised by remote collaborators.

Responsibilities:
- Carry the remote service's error code and its message verbatim.
"""

from __future__ import annotations


class DirectoryError(Exception):
    """
    Rejection from the user directory (bad credentials, unconfirmed account, ...).
    `code` is the directory's error type name, e.g. `UserNotConfirmedException`.
    """

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class FederationError(Exception):
    """
    Rejection from the credential exchange.
    """

    def __init__(self, message: str, *, code: str = "") -> None:
        super().__init__(message)
        self.code = code
        self.message = message


# --- Module Notes -----------------------------------------------------------
# `str(err)` is always the remote message; flows pass it through as Outcome reasons.
