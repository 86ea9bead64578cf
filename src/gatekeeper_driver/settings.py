"""
gatekeeper_driver.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for the driver (service address,
  admin identity, retry budget, logging).
- Hide secrets from repr/logging (admin and demo passwords).
- Surface malformed or missing configuration at load time as `ConfigurationInvalid`.
"""

from __future__ import annotations

from pathlib import Path

import httpx
from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gatekeeper_driver import __version__
from gatekeeper_driver.errors import ConfigurationInvalid


class GatekeeperSettings(BaseSettings):
    """
    Driver configuration:
    - `uri` + `port` locate the Gatekeeper service
    - `admin_*` is the identity used for admin-scoped calls
    - everything else has a safe default
    """

    model_config = SettingsConfigDict(env_prefix="GATEKEEPER_", case_sensitive=False)

    uri: str
    port: int = Field(ge=1, le=65535)

    # Admin identity (admin-session mode). Optional so non-admin callers can omit it.
    admin_user_id: int | None = None
    admin_password: SecretStr | None = None

    # Transport
    timeout: float = Field(default=10.0, gt=0)
    user_agent: str = f"gatekeeper-driver/{__version__}"

    # Retry protocol
    max_attempts: int = Field(default=5, ge=1)
    # Empty means every non-success status on an admin call counts as a token rejection.
    rejection_statuses: list[int] = Field(default_factory=list)

    # Logging
    service_name: str = "gatekeeper-driver"
    log_level: str = "INFO"
    log_file: str | None = None
    log_file_level: str = "INFO"

    # Demo CLI
    demo_user_id: int | None = None
    demo_password: SecretStr | None = None

    @field_validator("uri")
    @classmethod
    def _check_uri(cls, value: str) -> str:
        try:
            url = httpx.URL(value.strip())
        except httpx.InvalidURL as e:
            raise ValueError(f"invalid uri: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError("uri must be an absolute http(s) address")
        if url.port is not None or url.path not in ("", "/"):
            raise ValueError("uri must not carry a port or path; set port separately")
        host = f"[{url.host}]" if ":" in url.host else url.host
        return f"{url.scheme}://{host}"

    @field_validator("admin_password", "demo_password")
    @classmethod
    def _check_ascii_secret(cls, value: SecretStr | None) -> SecretStr | None:
        # Passwords travel in X-Auth-Password, and header values must be ASCII.
        if value is not None and not value.get_secret_value().isascii():
            raise ValueError("password must contain ASCII characters only")
        return value

    @field_validator("log_level", "log_file_level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "WARN", "ERROR", "CRITICAL", "FATAL", "OFF"):
            raise ValueError(f"unknown log level: {value}")
        return level

    @property
    def base_url(self) -> str:
        return f"{self.uri}:{self.port}"

    @property
    def has_admin_identity(self) -> bool:
        return self.admin_user_id is not None and self.admin_password is not None


def load_settings(env_file: str | Path | None = None, **overrides: object) -> GatekeeperSettings:
    """
    Build settings from the environment (and an optional dotenv-style file).

    Any validation problem is raised as `ConfigurationInvalid` so a misconfigured
    driver never gets as far as issuing a request.
    """

    if env_file is not None and not Path(env_file).is_file():
        raise ConfigurationInvalid(f"configuration file not found: {env_file}")
    try:
        return GatekeeperSettings(_env_file=env_file, **overrides)  # type: ignore[call-arg]
    except ValidationError as e:
        raise ConfigurationInvalid(f"invalid gatekeeper configuration: {e}") from e


# --- Module Notes -----------------------------------------------------------
# Values arrive as e.g. GATEKEEPER_URI=http://gatekeeper.local, GATEKEEPER_PORT=8000,
# GATEKEEPER_REJECTION_STATUSES='[401, 403]' (JSON for list-valued fields).
