# seo_scout/models.py
"""
Data models for SeoScout: OAuth credentials, crawl results, Search Console
metrics and properties.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class AccessGrant:
    """Result of a refresh-token exchange: a fresh access token only."""

    access_token: str
    expires_in: int


@dataclass(frozen=True, slots=True)
class OAuthCredential:
    """Access/refresh token pair issued by the authorization-code exchange.

    ``refresh_token`` is ``None`` when the provider withheld it on a repeat
    grant; the caller keeps the token it already stored in that case.
    """

    access_token: str
    refresh_token: Optional[str]
    expires_in: int
    issued_at: datetime = field(default_factory=_utcnow)

    @property
    def expires_at(self) -> datetime:
        return self.issued_at + timedelta(seconds=self.expires_in)

    def is_expired(self, now: Optional[datetime] = None, leeway: int = 60) -> bool:
        """True if the access token expires within ``leeway`` seconds of ``now``."""
        now = now or _utcnow()
        return now + timedelta(seconds=leeway) >= self.expires_at

    def refreshed(self, grant: AccessGrant, issued_at: Optional[datetime] = None) -> OAuthCredential:
        """Return a new credential with the access token replaced; the refresh token is kept."""
        return replace(
            self,
            access_token=grant.access_token,
            expires_in=grant.expires_in,
            issued_at=issued_at or _utcnow(),
        )

    def merge_previous(self, stored_refresh_token: Optional[str]) -> OAuthCredential:
        """Retain a previously stored refresh token if this grant did not carry one."""
        if self.refresh_token or not stored_refresh_token:
            return self
        return replace(self, refresh_token=stored_refresh_token)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_in": self.expires_in,
            "issued_at": self.issued_at.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class ChildSitemapFailure:
    """A child sitemap that could not be fetched or parsed (non-fatal)."""

    sitemap_url: str
    reason: str


@dataclass(slots=True)
class CrawlResult:
    """Flattened page URLs of a sitemap tree plus the children that failed."""

    urls: List[str] = field(default_factory=list)
    failures: List[ChildSitemapFailure] = field(default_factory=list)

    @property
    def partial(self) -> bool:
        return bool(self.failures)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "urls": list(self.urls),
            "failures": [asdict(f) for f in self.failures],
            "partial": self.partial,
        }


@dataclass(frozen=True, slots=True)
class PageMetric:
    """Trailing-window Search Console aggregate for a single page."""

    impressions: int = 0
    clicks: int = 0
    ctr: float = 0.0
    position: float = 0.0
    no_data: bool = False

    @classmethod
    def empty(cls) -> PageMetric:
        """All-zero sentinel returned when the page is not among the returned rows."""
        return cls(no_data=True)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> PageMetric:
        return cls(
            impressions=int(row.get("impressions", 0)),
            clicks=int(row.get("clicks", 0)),
            ctr=float(row.get("ctr", 0.0)),
            position=float(row.get("position", 0.0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class SearchProperty:
    """A Search Console property the token owner can read."""

    site_url: str
    permission_level: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
