"""
gatekeeper_driver.client.results

Discriminated outcome of every Gatekeeper operation.

Responsibilities:
- Represent success and each expected failure mode as its own value type, so
  callers can tell "legitimately empty/false" apart from "operation failed".
- Offer small helpers (`ok`, `value_or`, `unwrap`) for callers that do not
  want to match on the type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeAlias, TypeVar

from gatekeeper_driver.errors import OperationFailed

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    def value_or(self, default: Any) -> T:
        return self.value

    def unwrap(self) -> T:
        return self.value


class _FailureMixin:
    __slots__ = ()

    @property
    def ok(self) -> bool:
        return False

    def value_or(self, default: T) -> T:
        return default

    def unwrap(self) -> Any:
        raise OperationFailed(self)  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class AuthorizationExhausted(_FailureMixin):
    # Number of token cycles spent before giving up (acquisition failures included).
    attempts: int


@dataclass(frozen=True, slots=True)
class RemoteRejected(_FailureMixin):
    status_code: int


@dataclass(frozen=True, slots=True)
class TransportFailure(_FailureMixin):
    reason: str


Failure: TypeAlias = AuthorizationExhausted | RemoteRejected | TransportFailure
OperationResult: TypeAlias = Success[T] | AuthorizationExhausted | RemoteRejected | TransportFailure


# --- Module Notes -----------------------------------------------------------
# Typical use:
#     match client.list_users():
#         case Success(value=users): ...
#         case AuthorizationExhausted(): ...
