# seo_scout/gsc/api.py
"""
Authenticated requests against the Search Console REST API.

Maps HTTP and transport failures onto the package error taxonomy:
401/403 become UpstreamAuthError, everything else UpstreamUnavailable.
"""
from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

from aiohttp import ClientError, ClientSession

from seo_scout.config import SearchConsoleConfig
from seo_scout.errors import MissingParameter, UpstreamAuthError, UpstreamUnavailable
from seo_scout.http import SessionOwner
from seo_scout.logger import logger

_AUTH_STATUSES = (401, 403)


class SearchConsoleAPI(SessionOwner):
    """Base for Search Console clients: one bearer-authenticated call per operation."""

    def __init__(self, config: SearchConsoleConfig, session: Optional[ClientSession] = None) -> None:
        super().__init__(config.timeout, session)
        self.config = config

    async def _call(
        self,
        method: str,
        path: str,
        access_token: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        if not access_token:
            raise MissingParameter("Access token is required")
        session = self._require_session()
        url = f"{self.config.api_base}{path}"
        try:
            async with session.request(
                method,
                url,
                json=payload,
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=self._request_timeout(),
            ) as resp:
                if resp.status in _AUTH_STATUSES:
                    body = await resp.text()
                    logger.warning("Search Console rejected the access token: HTTP %s %s", resp.status, body[:200])
                    raise UpstreamAuthError(f"Search Console returned HTTP {resp.status}", status=resp.status)
                if not 200 <= resp.status < 300:
                    body = await resp.text()
                    logger.error("Search Console API error: HTTP %s %s", resp.status, body[:200])
                    raise UpstreamUnavailable(f"Search Console returned HTTP {resp.status}", status=resp.status)
                data = await resp.json(content_type=None)
        except (ClientError, asyncio.TimeoutError) as exc:
            logger.error("Search Console unreachable: %s", exc)
            raise UpstreamUnavailable(f"Search Console unreachable: {exc}") from exc
        except ValueError as exc:
            raise UpstreamUnavailable(f"Search Console returned invalid JSON: {exc}") from exc

        if not isinstance(data, dict):
            raise UpstreamUnavailable("Search Console returned an unexpected payload")
        _raise_for_error_body(data)
        return data


def _raise_for_error_body(data: Dict[str, Any]) -> None:
    """A 2xx body can still carry ``{"error": {"code": ..., "message": ...}}``."""
    error = data.get("error")
    if not error:
        return
    code = error.get("code") if isinstance(error, dict) else None
    message = error.get("message", "Search Console API error") if isinstance(error, dict) else str(error)
    if code in _AUTH_STATUSES:
        raise UpstreamAuthError(message, status=code)
    raise UpstreamUnavailable(message, status=code if isinstance(code, int) else None)


__all__ = ["SearchConsoleAPI"]
