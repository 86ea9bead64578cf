"""
gatekeeper_driver.auth.session

Admin session: the administrator identity plus the single cached admin token.

Responsibilities:
- Hold the admin identity and service address for one client.
- Cache at most one admin token; mutate it only through `set_token`,
  `clear_token` and `invalidate`.

No I/O happens here. Token acquisition lives in `auth.acquirer`; the
check -> use -> clear -> reacquire ordering is driven by `client.resilient`.
"""

from __future__ import annotations

import threading

from gatekeeper_driver.auth.models import AdminCredentials


class AdminSession:
    def __init__(self, *, base_url: str, credentials: AdminCredentials) -> None:
        self.base_url = base_url
        self.credentials = credentials
        self._token: str | None = None
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return (
            f"AdminSession(base_url={self.base_url!r}, admin_user_id={self.credentials.user_id}, "
            f"has_token={self.has_token})"
        )

    @property
    def has_token(self) -> bool:
        return self.current_token() is not None

    def current_token(self) -> str | None:
        with self._lock:
            return self._token

    def set_token(self, token: str) -> None:
        if not token:
            raise ValueError("admin token must be a non-empty string")
        with self._lock:
            self._token = token

    def clear_token(self) -> None:
        with self._lock:
            self._token = None

    def invalidate(self, token: str) -> bool:
        """
        Clear the cached token only if it is still `token`.

        Returns True when the cache was cleared. A token refreshed in the meantime
        is left alone so a stale rejection cannot clobber it.
        """

        with self._lock:
            if self._token != token:
                return False
            self._token = None
            return True
