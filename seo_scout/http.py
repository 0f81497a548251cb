# seo_scout/http.py
"""
Shared aiohttp session handling for the network-facing components.

Every component is an async context manager that opens its own
``ClientSession`` with a bounded total timeout, or borrows a session supplied
by the caller (which it then leaves open).
"""
from __future__ import annotations

from typing import Mapping, Optional

from aiohttp import ClientSession, ClientTimeout


class SessionOwner:
    """Base class: manages the lifetime of one aiohttp session."""

    def __init__(
        self,
        timeout: float,
        session: Optional[ClientSession] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.timeout = timeout
        self.session = session
        self._headers = dict(headers or {})
        self._owns_session = session is None

    async def __aenter__(self):
        if self.session is None or self.session.closed:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.timeout),
                headers=self._headers,
                raise_for_status=False,
            )
            self._owns_session = True
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    def _require_session(self) -> ClientSession:
        if not self.session:
            raise RuntimeError("Session not initialized")
        return self.session

    def _request_timeout(self) -> ClientTimeout:
        # applied per request so a borrowed session still honours our bound
        return ClientTimeout(total=self.timeout)


__all__ = ["SessionOwner"]
