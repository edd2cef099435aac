"""
federated_login.flows.verification

Email verification gate.

Responsibilities:
- Decide whether an authenticated user may log in directly or must verify their email.
- Trigger the verification-code delivery when verification is required.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from federated_login.directory.errors import DirectoryError
from federated_login.directory.models import (
    CodeDeliveryFailed,
    CodeDeliveryNotNeeded,
    CodeDeliveryStarted,
)
from federated_login.directory.protocols import DirectoryUser
from federated_login.flows.attributes import decode_attributes
from federated_login.flows.config import FederationConfig
from federated_login.flows.outcomes import (
    EmailVerificationFailed,
    EmailVerificationRequired,
    LoggedIn,
    Outcome,
)
from federated_login.observability.logging import get_logger

log = get_logger(__name__)

EMAIL = "email"
EMAIL_VERIFIED = "email_verified"


def email_verification_is_mandatory(
    config: FederationConfig | Mapping[str, Any] | None,
) -> bool:
    """
    Fail-closed: only an explicit `mandatory_email_verification=False` disables the gate.
    """

    if config is None:
        return True
    if isinstance(config, Mapping):
        flag = config.get("mandatory_email_verification")
    else:
        flag = getattr(config, "mandatory_email_verification", None)
    return flag is not False


async def _request_code(user: DirectoryUser, attribute: str) -> CodeDeliveryStarted | None:
    """
    Ask the directory to deliver a verification code for `attribute`.

    Returns the delivery details when the user must enter a code, None when the
    directory needs no input. Raises the directory's `DirectoryError` on failure.
    """

    result = await user.get_attribute_verification_code(attribute)
    match result:
        case CodeDeliveryStarted():
            return result
        case CodeDeliveryNotNeeded():
            return None
        case CodeDeliveryFailed(error=error):
            raise error
    raise TypeError(f"unexpected code delivery result: {result!r}")


async def send_attribute_verification_code(user: DirectoryUser, attribute: str) -> bool:
    """
    Returns True when the user must enter a code, False when no input is needed.
    Raises the directory's `DirectoryError` when delivery fails.
    """

    return await _request_code(user, attribute) is not None


async def _email_verification_flow(user: DirectoryUser, attributes: dict[str, str]) -> Outcome:
    try:
        delivery = await _request_code(user, EMAIL)
    except DirectoryError as error:
        log.warning(
            "verification.code_delivery_failed",
            username=user.username,
            code=error.code,
            error=error.message,
        )
        return EmailVerificationFailed(user=user, attributes=attributes, reason=error.message)

    if delivery is None:
        # Directory says nothing to enter; treated as already verified.
        log.warning("verification.code_not_needed", username=user.username)
        return LoggedIn(user=user, attributes=attributes)

    log.info("verification.code_sent", username=user.username, delivery_medium=delivery.delivery_medium)
    return EmailVerificationRequired(
        user=user, attributes=attributes, delivery_medium=delivery.delivery_medium
    )


async def login_or_verify_email(
    user: DirectoryUser, config: FederationConfig | Mapping[str, Any] | None
) -> Outcome:
    """
    Fetch the user's attributes and apply the verification policy.

    Resolves `LoggedIn` when verification is optional or `email_verified` is exactly
    the string "true"; otherwise `EmailVerificationRequired` / `EmailVerificationFailed`
    (or `LoggedIn` if the directory reports no code is needed).

    A failed attribute fetch raises `DirectoryError`; there is no Outcome for it.
    """

    attributes = decode_attributes(await user.get_user_attributes())
    if not email_verification_is_mandatory(config):
        return LoggedIn(user=user, attributes=attributes)
    # Literal comparison: "True", "1", "yes" are not verified.
    if attributes.get(EMAIL_VERIFIED) == "true":
        return LoggedIn(user=user, attributes=attributes)
    return await _email_verification_flow(user, attributes)
