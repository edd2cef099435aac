from __future__ import annotations

from federated_login.observability.logging import MASK, redact_secrets


def test_credential_fields_are_masked() -> None:
    event = redact_secrets(
        None,
        "info",
        {
            "event": "login.finished",
            "username": "alice",
            "password": "pw",
            "access_token": "eyJ...",
            "secret_key": "abc",
            "refresh_token": None,
        },
    )

    assert event["username"] == "alice"
    assert event["password"] == MASK
    assert event["access_token"] == MASK
    assert event["secret_key"] == MASK
    assert event["refresh_token"] is None
