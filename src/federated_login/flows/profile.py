"""
federated_login.flows.profile

Profile changes for an authenticated user.

Responsibilities:
- Update directory attributes and re-run the verification gate when it applies.
- Change the user's password.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from federated_login.directory.protocols import DirectoryUser
from federated_login.flows.attributes import decode_attributes, encode_attributes
from federated_login.flows.config import FederationConfig
from federated_login.flows.outcomes import AttributesUpdated, Outcome
from federated_login.flows.verification import email_verification_is_mandatory, login_or_verify_email
from federated_login.observability.context import flow_context
from federated_login.observability.logging import get_logger

log = get_logger(__name__)


async def update_attributes(
    user: DirectoryUser,
    attributes: Mapping[str, Any],
    config: FederationConfig | Mapping[str, Any] | None,
) -> Outcome:
    """
    Raises `DirectoryError` if the directory rejects the update (no Outcome for it).
    """

    with flow_context("update_attributes", username=user.username):
        attribute_list = encode_attributes(attributes)
        await user.update_attributes(attribute_list)
        log.info("profile.attributes_updated", names=sorted(attributes))

        if email_verification_is_mandatory(config):
            # The change may have touched `email`, so verification is re-evaluated.
            return await login_or_verify_email(user, config)
        return AttributesUpdated(attributes=decode_attributes(attribute_list))


async def change_password(user: DirectoryUser, old_password: str, new_password: str) -> str:
    with flow_context("change_password", username=user.username):
        result = await user.change_password(old_password, new_password)
        log.info("profile.password_changed")
        return result
