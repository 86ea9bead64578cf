"""
gatekeeper_driver.client.resilient

Runs admin-scoped operations with the cached-token, refresh-and-retry protocol.

Responsibilities:
- Attach the cached admin token (`X-Auth-Token`) to admin exchanges.
- Acquire a token when none is cached; on rejection clear it and try again.
- Bound the number of token cycles per logical operation (`max_attempts`).
- Classify outcomes into `OperationResult` values.

Protocol per operation, attempt counter n starting at 0:

    NO_TOKEN   -> acquire; failure ends with AuthorizationExhausted,
                  success caches the token -> HAVE_TOKEN
    HAVE_TOKEN -> exchange; expected status -> Success(decoded body)
                  rejection -> clear token, n += 1,
                  n >= max_attempts -> EXHAUSTED, else NO_TOKEN
    EXHAUSTED  -> AuthorizationExhausted, no further network activity

A freshly acquired token gets no special treatment: its rejection counts
as an attempt like any other.
"""

from __future__ import annotations

import enum
import threading
from collections.abc import Collection
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import httpx
import structlog

from gatekeeper_driver.auth.acquirer import TokenAcquirer
from gatekeeper_driver.auth.session import AdminSession
from gatekeeper_driver.client.decoders import Decoder
from gatekeeper_driver.client.results import (
    AuthorizationExhausted,
    OperationResult,
    RemoteRejected,
    Success,
)
from gatekeeper_driver.client.transport import exchange
from gatekeeper_driver.observability.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 5


@dataclass(frozen=True, slots=True)
class AdminOperation(Generic[T]):
    """
    Description of one admin-scoped call, consumed by `ResilientAdminClient.execute`.
    """

    name: str
    method: str
    path: str
    decoder: Decoder[T]
    expected_status: int = 200
    json_body: dict[str, Any] | None = None


class _State(enum.Enum):
    NO_TOKEN = "no_token"
    HAVE_TOKEN = "have_token"
    EXHAUSTED = "exhausted"


class ResilientAdminClient:
    def __init__(
        self,
        *,
        session: AdminSession,
        http: httpx.Client,
        acquirer: TokenAcquirer | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        rejection_statuses: Collection[int] = (),
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._session = session
        self._http = http
        self._acquirer = acquirer or TokenAcquirer(http=http)
        self._max_attempts = max_attempts
        self._rejection_statuses = frozenset(rejection_statuses)
        # One admin operation at a time per session: exchanges are never issued in
        # parallel and a refresh cannot race another caller's clear.
        self._lock = threading.Lock()

        if not self._rejection_statuses:
            log.debug(
                "gatekeeper.broad_rejection_policy",
                detail="every non-success admin status is treated as a token rejection and retried",
            )

    @property
    def session(self) -> AdminSession:
        return self._session

    def is_rejection(self, status_code: int) -> bool:
        return not self._rejection_statuses or status_code in self._rejection_statuses

    def execute(self, operation: AdminOperation[T]) -> OperationResult[T]:
        with self._lock, structlog.contextvars.bound_contextvars(operation=operation.name):
            return self._run(operation)

    def _run(self, operation: AdminOperation[T]) -> OperationResult[T]:
        attempt = 0
        state = _State.HAVE_TOKEN if self._session.has_token else _State.NO_TOKEN

        while True:
            if state is _State.EXHAUSTED:
                log.error("gatekeeper.retry_exhausted", attempts=attempt)
                return AuthorizationExhausted(attempts=attempt)

            if state is _State.NO_TOKEN:
                acquired = self._acquirer.acquire(
                    self._session.credentials.user_id, self._session.credentials.password
                )
                if not isinstance(acquired, Success):
                    log.error("gatekeeper.admin_token_unavailable", attempt=attempt, result=repr(acquired))
                    return AuthorizationExhausted(attempts=attempt + 1)
                self._session.set_token(acquired.value)
                state = _State.HAVE_TOKEN
                continue

            token = self._session.current_token()
            if token is None:
                state = _State.NO_TOKEN
                continue

            response = exchange(
                self._http,
                operation.method,
                operation.path,
                headers={"X-Auth-Token": token},
                json=operation.json_body,
            )
            if not isinstance(response, httpx.Response):
                return response

            log.debug("gatekeeper.admin_response", attempt=attempt, status_code=response.status_code)
            if response.status_code == operation.expected_status:
                return Success(operation.decoder(response))

            if not self.is_rejection(response.status_code):
                return RemoteRejected(status_code=response.status_code)

            self._session.invalidate(token)
            attempt += 1
            log.warning(
                "gatekeeper.admin_token_rejected",
                attempt=attempt,
                max_attempts=self._max_attempts,
                status_code=response.status_code,
            )
            state = _State.EXHAUSTED if attempt >= self._max_attempts else _State.NO_TOKEN


# --- Module Notes -----------------------------------------------------------
# Acquisition failures and transport failures are terminal and never consume
# further attempts. Decode failures propagate as `DecodeFailure`.
