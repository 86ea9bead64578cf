"""
gatekeeper_driver.auth.models

Gatekeeper domain models.

Responsibilities:
- Define the admin identity (`AdminCredentials`) used to mint admin tokens.
- Define the typed records returned by list/register operations.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import SecretStr


@dataclass(frozen=True, slots=True)
class AdminCredentials:
    """
    Administrator identity; the password stays wrapped so it never reaches logs.
    """

    user_id: int
    password: SecretStr = field(repr=False)

    @classmethod
    def of(cls, user_id: int, password: str | SecretStr) -> AdminCredentials:
        if not isinstance(password, SecretStr):
            password = SecretStr(password)
        return cls(user_id=user_id, password=password)


@dataclass(frozen=True, slots=True)
class UserEntry:
    username: str
    # None when the server answers with the reduced `userlist`-only payload.
    user_id: int | None


@dataclass(frozen=True, slots=True)
class ServiceEntry:
    short_name: str
    service_key: str


@dataclass(frozen=True, slots=True)
class ServiceRegistration:
    service_uri: str
    service_key: str


# --- Module Notes -----------------------------------------------------------
# Tokens are plain `str`: opaque, issued and expired by the server only.
