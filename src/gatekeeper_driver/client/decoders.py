"""
gatekeeper_driver.client.decoders

Response-body decoders for successful Gatekeeper responses.

Every decoder takes the raw `httpx.Response` and either returns the typed value
or raises `DecodeFailure`; a body that does not match the documented shape is a
contract mismatch, never an empty result.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import httpx

from gatekeeper_driver.auth.models import ServiceEntry, ServiceRegistration, UserEntry
from gatekeeper_driver.errors import DecodeFailure

T = TypeVar("T")

Decoder = Callable[[httpx.Response], T]


def _json(operation: str, response: httpx.Response) -> dict[str, Any]:
    try:
        payload = response.json()
    except ValueError as e:
        raise DecodeFailure(operation, f"body is not JSON ({e})", body=response.text) from e
    if not isinstance(payload, dict):
        raise DecodeFailure(operation, "expected a JSON object", body=payload)
    return payload


def _field(operation: str, payload: Any, key: str, kind: type | tuple[type, ...]) -> Any:
    if not isinstance(payload, dict) or key not in payload:
        raise DecodeFailure(operation, f"missing field {key!r}", body=payload)
    value = payload[key]
    if not isinstance(value, kind):
        raise DecodeFailure(operation, f"field {key!r} has unexpected type", body=payload)
    return value


def _first_info(operation: str, response: httpx.Response) -> dict[str, Any]:
    info = _field(operation, _json(operation, response), "info", list)
    if not info or not isinstance(info[0], dict):
        raise DecodeFailure(operation, "empty 'info' list", body=info)
    return info[0]


def _as_int(operation: str, value: Any) -> int:
    # Ids come back as numbers or numeric strings depending on the server build.
    if isinstance(value, bool):
        raise DecodeFailure(operation, "id is not an integer", body=value)
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise DecodeFailure(operation, "id is not an integer", body=value) from e


def decode_token(response: httpx.Response) -> str:
    token = _field("generate_token", _json("generate_token", response), "token", dict)
    token_id = _field("generate_token", token, "id", (str, int))
    if str(token_id) == "":
        raise DecodeFailure("generate_token", "empty token id", body=token)
    return str(token_id)


def decode_user_list(response: httpx.Response) -> list[UserEntry]:
    payload = _json("list_users", response)
    names = _field("list_users", payload, "userlist", list)
    if "userids" not in payload:
        return [UserEntry(username=str(name), user_id=None) for name in names]
    ids = _field("list_users", payload, "userids", list)
    if len(ids) != len(names):
        raise DecodeFailure("list_users", "userlist and userids differ in length", body=payload)
    return [
        UserEntry(username=str(name), user_id=_as_int("list_users", uid))
        for name, uid in zip(names, ids)
    ]


def decode_user_id(response: httpx.Response) -> int:
    entry = _first_info("register_user", response)
    return _as_int("register_user", _field("register_user", entry, "id", (str, int)))


def decode_service_list(response: httpx.Response) -> list[ServiceEntry]:
    payload = _json("list_services", response)
    services = _field("list_services", payload, "servicelist", dict)
    names = _field("list_services", services, "shortname", list)
    keys = _field("list_services", services, "service-key", list)
    if len(keys) != len(names):
        raise DecodeFailure("list_services", "shortname and service-key differ in length", body=services)
    return [ServiceEntry(short_name=str(n), service_key=str(k)) for n, k in zip(names, keys)]


def decode_service_registration(response: httpx.Response) -> ServiceRegistration:
    entry = _first_info("register_service", response)
    return ServiceRegistration(
        service_uri=_field("register_service", entry, "service-uri", str),
        service_key=_field("register_service", entry, "service-key", str),
    )


def accept(response: httpx.Response) -> bool:
    # Status-only operations: the body is not inspected.
    return True
