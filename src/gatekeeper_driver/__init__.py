"""
gatekeeper_driver

Client-side access layer for the Gatekeeper identity/authorization service.

Responsibilities:
- Expose package version metadata.
- Re-export the client entry points most callers need.
"""

__version__ = "0.1.0"

from gatekeeper_driver.client.gatekeeper import GatekeeperClient  # noqa: E402
from gatekeeper_driver.client.results import (  # noqa: E402
    AuthorizationExhausted,
    OperationResult,
    RemoteRejected,
    Success,
    TransportFailure,
)
from gatekeeper_driver.errors import (  # noqa: E402
    ConfigurationInvalid,
    DecodeFailure,
    GatekeeperError,
    OperationFailed,
)

__all__ = [
    "AuthorizationExhausted",
    "ConfigurationInvalid",
    "DecodeFailure",
    "GatekeeperClient",
    "GatekeeperError",
    "OperationFailed",
    "OperationResult",
    "RemoteRejected",
    "Success",
    "TransportFailure",
    "__version__",
]


# --- Module Notes -----------------------------------------------------------
# `__version__` is defined before the re-exports because settings derive the
# default User-Agent from it.
