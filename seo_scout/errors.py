# seo_scout/errors.py
"""
Error taxonomy shared by every SeoScout component.

Each exception carries a ``category`` and a ``user_message`` so that callers
(CLI, request handlers) can show a category-specific message instead of a raw
upstream traceback.
"""
from __future__ import annotations

from typing import Optional

__all__ = (
    "SeoScoutError",
    "MissingParameter",
    "InvalidUrl",
    "ServerMisconfigured",
    "UpstreamAuthError",
    "UpstreamUnavailable",
)


class SeoScoutError(Exception):
    """Base class for all errors raised by the package."""

    category: str = "error"
    user_message: str = "Unexpected error."

    def __init__(self, message: str, *, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class MissingParameter(SeoScoutError):
    """A required input was empty or absent. Never retried."""

    category = "bad_request"
    user_message = "A required parameter is missing."


class InvalidUrl(SeoScoutError):
    """The URL could not be parsed. Never retried."""

    category = "bad_request"
    user_message = "The URL is not valid."


class ServerMisconfigured(SeoScoutError):
    """A required secret or setting is not provisioned."""

    category = "configuration"
    user_message = "Server configuration error. Contact the operator."


class UpstreamAuthError(SeoScoutError):
    """The OAuth provider or Google API rejected the credential."""

    category = "auth_required"
    user_message = "Google authorization expired or was revoked. Please sign in again."


class UpstreamUnavailable(SeoScoutError):
    """Network failure or non-auth error from a third party. Safe to retry later."""

    category = "unavailable"
    user_message = "The upstream service is unavailable. Try again later."
