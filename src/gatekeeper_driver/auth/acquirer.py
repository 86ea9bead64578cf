"""
gatekeeper_driver.auth.acquirer

Exchanges a user id and password for a fresh Gatekeeper token.

Responsibilities:
- Issue `POST /token/` with `X-Auth-Uid` / `X-Auth-Password` headers.
- Report the outcome as an `OperationResult[str]`; never retry internally.
"""

from __future__ import annotations

import httpx
from pydantic import SecretStr

from gatekeeper_driver.client.decoders import decode_token
from gatekeeper_driver.client.results import OperationResult, RemoteRejected, Success
from gatekeeper_driver.client.transport import exchange
from gatekeeper_driver.observability.logging import get_logger

log = get_logger(__name__)

TOKEN_PATH = "/token/"


class TokenAcquirer:
    def __init__(self, *, http: httpx.Client) -> None:
        self._http = http

    def acquire(self, user_id: int, password: str | SecretStr) -> OperationResult[str]:
        if isinstance(password, SecretStr):
            password = password.get_secret_value()
        response = exchange(
            self._http,
            "POST",
            TOKEN_PATH,
            headers={"X-Auth-Uid": str(user_id), "X-Auth-Password": password},
        )
        if not isinstance(response, httpx.Response):
            return response

        log.debug("gatekeeper.token_requested", user_id=user_id, status_code=response.status_code)
        if response.status_code != 200:
            return RemoteRejected(status_code=response.status_code)
        return Success(decode_token(response))


# --- Module Notes -----------------------------------------------------------
# The resilient admin client decides whether a failed acquisition ends the
# surrounding operation; this class only reports what happened.
