"""
tests.test_roundtrip

End-to-end scenarios against the in-memory FastAPI Gatekeeper.
"""

from __future__ import annotations

from fastapi.testclient import TestClient

from conftest import make_settings
from fake_gatekeeper import GatekeeperState
from gatekeeper_driver import GatekeeperClient
from gatekeeper_driver.auth.models import AdminCredentials, ServiceEntry, UserEntry
from gatekeeper_driver.client.results import AuthorizationExhausted, RemoteRejected, Success


def _admin_client(http: TestClient, **overrides) -> GatekeeperClient:
    return GatekeeperClient.from_settings(make_settings(**overrides), http=http)


def test_register_service_then_list(gk_http: TestClient) -> None:
    client = _admin_client(gk_http)

    registered = client.register_service("svc", "desc")
    assert isinstance(registered, Success)

    listed = client.list_services()
    assert isinstance(listed, Success)
    assert ServiceEntry("svc", registered.value.service_key) in listed.value


def test_register_user_then_list(gk_http: TestClient, gk_state: GatekeeperState) -> None:
    client = _admin_client(gk_http)

    uid = client.register_user("dave", "dave-pw", False, "svc").unwrap()

    assert UserEntry("dave", uid) in client.list_users().unwrap()
    # One token served both admin calls.
    assert gk_state.token_requests == 1
    assert gk_state.admin_requests == 2


def test_generate_and_validate_token(gk_http: TestClient, gk_state: GatekeeperState) -> None:
    uid = gk_state.add_user("erin", "pw", is_admin=False)
    client = _admin_client(gk_http)

    token = client.generate_token(uid, "pw")
    assert isinstance(token, Success) and token.value

    assert client.validate_token(token.value, uid) == Success(True)
    assert client.validate_token(token.value, uid + 100) == RemoteRejected(status_code=403)
    assert client.validate_token("bogus", uid) == RemoteRejected(status_code=401)


def test_validate_token_for_service(gk_http: TestClient, gk_state: GatekeeperState) -> None:
    client = _admin_client(gk_http)
    key = client.register_service("billing", "Billing").unwrap().service_key
    client.register_service("metrics", "Metrics")
    uid = client.register_user("frank", "pw", False, "billing").unwrap()
    token = client.generate_token(uid, "pw").unwrap()

    assert client.validate_token(token, service_key=key) == Success(True)
    other_key = dict((s.short_name, s.service_key) for s in client.list_services().unwrap())["metrics"]
    assert client.validate_token_for_service(token, other_key) == RemoteRejected(status_code=403)


def test_simple_authentication(gk_http: TestClient) -> None:
    client = _admin_client(gk_http)

    assert client.simple_authentication(1, "admin-pw") == Success(True)
    assert client.simple_authentication(1, "nope") == RemoteRejected(status_code=401)


def test_expired_admin_token_is_refreshed(gk_http: TestClient, gk_state: GatekeeperState) -> None:
    client = _admin_client(gk_http)
    assert client.list_users().ok
    gk_state.revoke_all_tokens()

    assert client.list_users().ok
    assert gk_state.token_requests == 2
    assert gk_state.admin_requests == 3


def test_delete_missing_user_default_policy(gk_http: TestClient) -> None:
    client = _admin_client(gk_http)
    uid = client.register_user("gone", "pw", False, "").unwrap()

    assert client.delete_user(uid) == Success(True)
    # 404 is retried like any rejection and ends as a failure value, not an exception.
    again = client.delete_user(uid)
    assert again == AuthorizationExhausted(attempts=5)
    assert not again.ok


def test_delete_missing_user_narrowed_policy(gk_http: TestClient) -> None:
    client = _admin_client(gk_http, rejection_statuses=[401, 403])
    uid = client.register_user("gone", "pw", False, "").unwrap()
    client.delete_user(uid)

    assert client.delete_user(uid) == RemoteRejected(status_code=404)


def test_wrong_admin_password(gk_http: TestClient, gk_state: GatekeeperState) -> None:
    client = _admin_client(gk_http, admin_password="wrong")

    assert client.list_users() == AuthorizationExhausted(attempts=1)
    assert client.list_services() == AuthorizationExhausted(attempts=1)
    assert gk_state.token_requests == 2
    assert gk_state.admin_requests == 0


def test_unprivileged_admin_identity(gk_http: TestClient, gk_state: GatekeeperState) -> None:
    uid = gk_state.add_user("mallory", "pw", is_admin=False)
    client = GatekeeperClient(
        settings=make_settings(), credentials=AdminCredentials.of(uid, "pw"), http=gk_http
    )

    assert client.list_users() == AuthorizationExhausted(attempts=5)
    assert gk_state.token_requests == 5
    assert gk_state.admin_requests == 5
