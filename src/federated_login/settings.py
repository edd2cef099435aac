"""
federated_login.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Env-driven configuration (prefix `FEDAUTH_`).
    Pool identifiers have no safe defaults; they must be supplied per environment.
    """

    model_config = SettingsConfigDict(env_prefix="FEDAUTH_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "federated-login"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # User pool (directory) + identity pool (credential exchange)
    region: str = "us-east-1"
    user_pool_id: str = ""
    client_id: str = Field(default="", repr=False)
    identity_pool_id: str = ""

    # Fail-closed: only an explicit false disables the verification gate.
    mandatory_email_verification: bool = True

    # Endpoint overrides (LocalStack, moto server, ...)
    idp_endpoint_url: str | None = None
    identity_endpoint_url: str | None = None
    http_timeout_seconds: float = 10.0


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Flows never read Settings directly; they receive a FederationConfig built from it
# (see `flows.config`), which keeps them usable outside the HTTP service.
