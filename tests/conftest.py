"""
tests.conftest

Shared fixtures: settings, a scripted MockTransport Gatekeeper, and the
in-memory FastAPI Gatekeeper behind a TestClient.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from fake_gatekeeper import GatekeeperState, create_fake_gatekeeper
from gatekeeper_driver.settings import GatekeeperSettings

BASE_URL = "http://gatekeeper.test:8000"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # Host GATEKEEPER_* variables must not leak into settings built by tests.
    for key in list(os.environ):
        if key.upper().startswith("GATEKEEPER_"):
            monkeypatch.delenv(key)


def make_settings(**overrides: Any) -> GatekeeperSettings:
    values: dict[str, Any] = {
        "uri": "http://gatekeeper.test",
        "port": 8000,
        "admin_user_id": 1,
        "admin_password": "admin-pw",
    }
    values.update(overrides)
    return GatekeeperSettings(**values)


@pytest.fixture
def settings() -> GatekeeperSettings:
    return make_settings()


class ScriptedGatekeeper:
    """
    MockTransport handler with scripted admin statuses.

    `admin_statuses` is consumed one entry per admin exchange; once empty every
    admin exchange succeeds with `admin_body`.
    """

    def __init__(
        self,
        *,
        admin_statuses: list[int] | None = None,
        admin_body: Any = None,
        token_status: int = 200,
    ) -> None:
        self.admin_statuses = list(admin_statuses or [])
        self.admin_body = (
            admin_body if admin_body is not None else {"userlist": ["admin", "bob"], "userids": [1, 2]}
        )
        self.token_status = token_status
        self.token_requests: list[httpx.Request] = []
        self.admin_requests: list[httpx.Request] = []
        self.other_requests: list[httpx.Request] = []
        self.other_status = 200
        self.events: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/token/":
            self.token_requests.append(request)
            self.events.append("acquire")
            if self.token_status != 200:
                return httpx.Response(self.token_status, json={"msg": "denied"})
            return httpx.Response(200, json={"token": {"id": f"tok-{len(self.token_requests)}"}})
        if path.startswith("/admin/"):
            self.admin_requests.append(request)
            self.events.append("admin")
            status = self.admin_statuses.pop(0) if self.admin_statuses else 200
            if status != 200:
                return httpx.Response(status, json={"msg": "rejected"})
            return httpx.Response(200, json=self.admin_body)
        self.other_requests.append(request)
        return httpx.Response(self.other_status)

    def http(self) -> httpx.Client:
        return httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(self))


@pytest.fixture
def gk_state() -> GatekeeperState:
    state = GatekeeperState()
    state.add_user("admin", "admin-pw", is_admin=True, access="ALL")
    return state


@pytest.fixture
def gk_http(gk_state: GatekeeperState) -> Iterator[TestClient]:
    with TestClient(create_fake_gatekeeper(gk_state), base_url=BASE_URL) as client:
        yield client
