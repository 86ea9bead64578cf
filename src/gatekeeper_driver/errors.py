"""
gatekeeper_driver.errors

Exceptions raised by the driver.

Only conditions that indicate a broken setup or a broken contract with the
server are raised. Expected failures (bad credentials, stale tokens, rejected
calls, network errors) are returned as values, see `client.results`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from gatekeeper_driver.client.results import Failure


class GatekeeperError(Exception):
    pass


class ConfigurationInvalid(GatekeeperError):
    pass


class DecodeFailure(GatekeeperError):
    def __init__(self, operation: str, message: str, *, body: Any = None) -> None:
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.body = _excerpt(body)


class OperationFailed(GatekeeperError):
    def __init__(self, failure: Failure) -> None:
        super().__init__(f"gatekeeper operation failed: {failure!r}")
        self.failure = failure


def _excerpt(body: Any, limit: int = 200) -> str | None:
    if body is None:
        return None
    text = body if isinstance(body, str) else repr(body)
    return text if len(text) <= limit else text[:limit] + "..."
