"""
gatekeeper_driver.client.transport

HTTP boundary: one request/response exchange with the Gatekeeper service.

Responsibilities:
- Build the shared `httpx.Client` (base url, timeout, User-Agent) from settings.
- Turn httpx request errors (connect, timeout, protocol) into `TransportFailure`
  values instead of exceptions.
"""

from __future__ import annotations

from typing import Any

import httpx

from gatekeeper_driver.client.results import TransportFailure
from gatekeeper_driver.observability.logging import get_logger
from gatekeeper_driver.settings import GatekeeperSettings

log = get_logger(__name__)


def build_http_client(settings: GatekeeperSettings) -> httpx.Client:
    return httpx.Client(
        base_url=settings.base_url,
        timeout=settings.timeout,
        headers={"User-Agent": settings.user_agent},
    )


def exchange(
    http: httpx.Client,
    method: str,
    path: str,
    *,
    headers: dict[str, str] | None = None,
    json: Any = None,
) -> httpx.Response | TransportFailure:
    try:
        # read() so the connection is released before the caller decodes or retries.
        response = http.request(method, path, headers=headers, json=json)
        response.read()
    except httpx.RequestError as e:
        log.error("gatekeeper.transport_error", method=method, path=path, error=str(e))
        return TransportFailure(reason=f"{type(e).__name__}: {e}")
    except UnicodeEncodeError as e:
        # httpx only sends ASCII header values; the request never leaves the client.
        log.error("gatekeeper.header_not_ascii", method=method, path=path, position=e.start)
        return TransportFailure(reason="UnicodeEncodeError: header value is not ASCII")
    log.debug("gatekeeper.exchange", method=method, path=path, status_code=response.status_code)
    return response
