# seo_scout/auth/token_broker.py
"""
TokenBroker: Google OAuth2 authorization-code exchange and refresh-token renewal.

The broker is stateless. It never stores tokens; the caller persists the
refresh token and passes it back in when a new access token is needed.
Each operation performs at most one request to the token endpoint and does
not retry.
"""
from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional
from urllib.parse import urlencode

from aiohttp import ClientError, ClientSession

from seo_scout.config import GoogleOAuthConfig
from seo_scout.errors import (
    MissingParameter,
    ServerMisconfigured,
    UpstreamAuthError,
    UpstreamUnavailable,
)
from seo_scout.http import SessionOwner
from seo_scout.logger import logger
from seo_scout.models import AccessGrant, OAuthCredential


class TokenBroker(SessionOwner):
    """Exchanges authorization codes and refresh tokens at the Google token endpoint."""

    def __init__(self, config: GoogleOAuthConfig, session: Optional[ClientSession] = None) -> None:
        super().__init__(config.timeout, session)
        self.config = config
        if not config.client_secret:
            logger.warning("Google client secret is not configured; token grants will fail")

    # ------------------------------------------------------------------ #
    # Preconditions                                                      #
    # ------------------------------------------------------------------ #

    def validate(self) -> None:
        """Startup check: raise ServerMisconfigured if client id or secret is missing."""
        if not self.config.client_id:
            raise ServerMisconfigured("Google client id is not configured")
        if not self.config.client_secret:
            raise ServerMisconfigured("Google client secret is not configured")

    # ------------------------------------------------------------------ #
    # Public API                                                         #
    # ------------------------------------------------------------------ #

    def authorization_url(self, state: Optional[str] = None, redirect_uri: Optional[str] = None) -> str:
        """Consent page URL that starts the code flow with offline access."""
        if not self.config.client_id:
            raise ServerMisconfigured("Google client id is not configured")
        params = {
            "client_id": self.config.client_id,
            "redirect_uri": redirect_uri or self.config.redirect_uri,
            "response_type": "code",
            "scope": " ".join(self.config.scopes),
            "access_type": "offline",
            "include_granted_scopes": "true",
            "prompt": "consent",
        }
        if state:
            params["state"] = state
        return f"{self.config.auth_uri}?{urlencode(params)}"

    async def exchange_code(self, code: str, redirect_uri: Optional[str] = None) -> OAuthCredential:
        """Exchange a one-time authorization code for an access/refresh token pair.

        ``refresh_token`` on the result is ``None`` when Google withholds it on
        a repeat grant; the caller should then keep its stored token
        (see :meth:`OAuthCredential.merge_previous`).
        """
        if not code:
            raise MissingParameter("Authorization code is required")
        self._require_secret()

        data = await self._post_token(
            {
                "client_id": self.config.client_id or "",
                "client_secret": self.config.client_secret or "",
                "code": code,
                "grant_type": "authorization_code",
                "redirect_uri": redirect_uri or self.config.redirect_uri,
            },
            action="exchange authorization code",
        )
        credential = OAuthCredential(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token") or None,
            expires_in=_expires_in(data),
        )
        logger.info(
            "Authorization code exchanged (refresh token: %s, expires in %ss)",
            "yes" if credential.refresh_token else "no",
            credential.expires_in,
        )
        return credential

    async def refresh_access_token(self, refresh_token: str) -> AccessGrant:
        """Mint a fresh access token from a stored refresh token."""
        if not refresh_token:
            raise MissingParameter("Refresh token is required")
        self._require_secret()

        data = await self._post_token(
            {
                "client_id": self.config.client_id or "",
                "client_secret": self.config.client_secret or "",
                "refresh_token": refresh_token,
                "grant_type": "refresh_token",
            },
            action="refresh access token",
        )
        grant = AccessGrant(access_token=data["access_token"], expires_in=_expires_in(data))
        logger.info("Access token refreshed (expires in %ss)", grant.expires_in)
        return grant

    # ------------------------------------------------------------------ #
    # Internals                                                          #
    # ------------------------------------------------------------------ #

    def _require_secret(self) -> None:
        if not self.config.client_secret:
            raise ServerMisconfigured("Google client secret is not configured")

    async def _post_token(self, form: Dict[str, str], *, action: str) -> Dict[str, Any]:
        session = self._require_session()
        try:
            async with session.post(
                self.config.token_uri,
                data=form,
                headers={"Accept": "application/json"},
                timeout=self._request_timeout(),
            ) as resp:
                status = resp.status
                if status >= 500:
                    body = await resp.text()
                    logger.warning("Token endpoint failed to %s: HTTP %s %s", action, status, body[:200])
                    raise UpstreamUnavailable(f"Token endpoint returned HTTP {status}", status=status)
                if status >= 400:
                    body = await resp.text()
                    logger.warning("Token endpoint refused to %s: HTTP %s %s", action, status, body[:200])
                    raise UpstreamAuthError(f"Failed to {action}: HTTP {status}", status=status)
                data = await resp.json(content_type=None)
        except (ClientError, asyncio.TimeoutError) as exc:
            logger.warning("Token endpoint unreachable while trying to %s: %s", action, exc)
            raise UpstreamUnavailable(f"Token endpoint unreachable: {exc}") from exc
        except ValueError as exc:
            raise UpstreamUnavailable(f"Token endpoint returned invalid JSON: {exc}") from exc

        if not isinstance(data, dict) or not data.get("access_token"):
            raise UpstreamAuthError(f"Failed to {action}: no access token in response", status=status)
        return data


def _expires_in(data: Dict[str, Any]) -> int:
    try:
        return int(data.get("expires_in") or 3600)
    except (TypeError, ValueError):
        return 3600


__all__ = ["TokenBroker"]
