"""
gatekeeper_driver.client.gatekeeper

Gatekeeper operations: the public client surface.

Responsibilities:
- Map each operation's domain arguments onto one Gatekeeper HTTP exchange.
- Route admin-scoped operations through `ResilientAdminClient`.
- Call non-admin endpoints directly with the caller-supplied credential/token
  (no refresh semantics).
"""

from __future__ import annotations

from pathlib import Path
from types import TracebackType
from urllib.parse import quote

import httpx
from pydantic import SecretStr

from gatekeeper_driver.auth.acquirer import TokenAcquirer
from gatekeeper_driver.auth.models import (
    AdminCredentials,
    ServiceEntry,
    ServiceRegistration,
    UserEntry,
)
from gatekeeper_driver.auth.session import AdminSession
from gatekeeper_driver.client import decoders
from gatekeeper_driver.client.resilient import AdminOperation, ResilientAdminClient
from gatekeeper_driver.client.results import OperationResult, RemoteRejected, Success
from gatekeeper_driver.client.transport import build_http_client, exchange
from gatekeeper_driver.errors import ConfigurationInvalid
from gatekeeper_driver.observability.logging import get_logger
from gatekeeper_driver.settings import GatekeeperSettings, load_settings

log = get_logger(__name__)


class GatekeeperClient:
    """
    Synchronous Gatekeeper client bound to one admin identity.

    Admin calls share one cached admin token; every call returns an
    `OperationResult` instead of raising for expected failures.
    """

    def __init__(
        self,
        *,
        settings: GatekeeperSettings,
        credentials: AdminCredentials,
        http: httpx.Client | None = None,
    ) -> None:
        self._settings = settings
        self._owns_http = http is None
        self._http = http if http is not None else build_http_client(settings)
        self._acquirer = TokenAcquirer(http=self._http)
        self._admin = ResilientAdminClient(
            session=AdminSession(base_url=settings.base_url, credentials=credentials),
            http=self._http,
            acquirer=self._acquirer,
            max_attempts=settings.max_attempts,
            rejection_statuses=settings.rejection_statuses,
        )
        log.debug(
            "gatekeeper.client_initialized",
            base_url=settings.base_url,
            admin_user_id=credentials.user_id,
        )

    @classmethod
    def from_settings(
        cls, settings: GatekeeperSettings, *, http: httpx.Client | None = None
    ) -> GatekeeperClient:
        # Admin identity comes from configuration (GATEKEEPER_ADMIN_USER_ID / _PASSWORD).
        if not settings.has_admin_identity:
            raise ConfigurationInvalid("admin_user_id and admin_password must be configured")
        credentials = AdminCredentials(
            user_id=settings.admin_user_id,  # type: ignore[arg-type]
            password=settings.admin_password,  # type: ignore[arg-type]
        )
        return cls(settings=settings, credentials=credentials, http=http)

    @classmethod
    def from_env(
        cls, env_file: str | Path | None = None, *, http: httpx.Client | None = None
    ) -> GatekeeperClient:
        return cls.from_settings(load_settings(env_file), http=http)

    @property
    def session(self) -> AdminSession:
        return self._admin.session

    def close(self) -> None:
        # Injected clients belong to the caller.
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> GatekeeperClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # Admin-scoped operations ------------------------------------------------

    def list_users(self) -> OperationResult[list[UserEntry]]:
        result = self._admin.execute(
            AdminOperation(
                name="list_users",
                method="GET",
                path="/admin/user/",
                decoder=decoders.decode_user_list,
            )
        )
        if isinstance(result, Success):
            log.debug("gatekeeper.user_list", count=len(result.value))
        return result

    def register_user(
        self,
        username: str,
        password: str | SecretStr,
        is_admin: bool,
        access_list: str,
    ) -> OperationResult[int]:
        if isinstance(password, SecretStr):
            password = password.get_secret_value()
        log.debug("gatekeeper.register_user", username=username, is_admin=is_admin)
        return self._admin.execute(
            AdminOperation(
                name="register_user",
                method="POST",
                path="/admin/user/",
                decoder=decoders.decode_user_id,
                json_body={
                    "username": username,
                    "password": password,
                    "isadmin": "y" if is_admin else "n",
                    "accesslist": access_list.strip(),
                },
            )
        )

    def delete_user(self, user_id: int) -> OperationResult[bool]:
        return self._admin.execute(
            AdminOperation(
                name="delete_user",
                method="DELETE",
                path=f"/admin/user/{int(user_id)}",
                decoder=decoders.accept,
            )
        )

    def list_services(self) -> OperationResult[list[ServiceEntry]]:
        result = self._admin.execute(
            AdminOperation(
                name="list_services",
                method="GET",
                path="/admin/service/",
                decoder=decoders.decode_service_list,
            )
        )
        if isinstance(result, Success):
            log.debug("gatekeeper.service_list", count=len(result.value))
        return result

    def register_service(self, short_name: str, description: str) -> OperationResult[ServiceRegistration]:
        log.debug("gatekeeper.register_service", short_name=short_name)
        return self._admin.execute(
            AdminOperation(
                name="register_service",
                method="POST",
                path="/admin/service/",
                decoder=decoders.decode_service_registration,
                json_body={"shortname": short_name, "description": description},
            )
        )

    # Non-admin operations ---------------------------------------------------

    def generate_token(self, user_id: int, password: str | SecretStr) -> OperationResult[str]:
        # Uses the target user's own credential; the cached admin token is untouched.
        return self._acquirer.acquire(user_id, password)

    def validate_token(
        self,
        token: str,
        user_id: int | None = None,
        *,
        service_key: str | None = None,
    ) -> OperationResult[bool]:
        if (user_id is None) == (service_key is None):
            raise ValueError("pass exactly one of user_id or service_key")
        if service_key is not None:
            return self.validate_token_for_service(token, service_key)
        return self._check(
            "validate_token",
            f"/token/validate/{_token_segment(token)}",
            {"X-Auth-Uid": str(user_id)},
            expected_status=200,
        )

    def validate_token_for_service(self, token: str, service_key: str) -> OperationResult[bool]:
        return self._check(
            "validate_token_for_service",
            f"/token/validate/{_token_segment(token)}",
            {"X-Auth-Service-Key": service_key},
            expected_status=200,
        )

    def simple_authentication(self, user_id: int, password: str | SecretStr) -> OperationResult[bool]:
        if isinstance(password, SecretStr):
            password = password.get_secret_value()
        return self._check(
            "simple_authentication",
            f"/auth/{int(user_id)}",
            {"X-Auth-Password": password},
            expected_status=202,
        )

    def _check(
        self, name: str, path: str, headers: dict[str, str], *, expected_status: int
    ) -> OperationResult[bool]:
        response = exchange(self._http, "GET", path, headers=headers)
        if not isinstance(response, httpx.Response):
            return response
        log.debug(f"gatekeeper.{name}", status_code=response.status_code)
        if response.status_code != expected_status:
            return RemoteRejected(status_code=response.status_code)
        return Success(True)


def _token_segment(token: str) -> str:
    if not token:
        raise ValueError("token must be a non-empty string")
    segment = quote(token, safe="")
    # "." and ".." would be collapsed as dot segments by URL normalization.
    if segment.strip(".") == "":
        segment = segment.replace(".", "%2E")
    return segment


# --- Module Notes -----------------------------------------------------------
# Non-admin rejections come back as RemoteRejected(status); "not authenticated"
# and "server error" are distinguishable by status code, transport errors by type.
