# seo_scout/gsc/metrics.py
"""
MetricsFetcher: trailing-window Search Console performance for one page.

One ``searchAnalytics/query`` call with a page breakdown, then an exact
string match of the target URL against the returned rows. A page that is
absent from the rows (no impressions, or cut off by the row limit) yields the
all-zero :meth:`PageMetric.empty` sentinel, not an error.
"""
from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Dict, Iterable, Optional
from urllib.parse import quote

from seo_scout.errors import MissingParameter, UpstreamUnavailable
from seo_scout.gsc.api import SearchConsoleAPI
from seo_scout.logger import logger
from seo_scout.models import PageMetric


class MetricsFetcher(SearchConsoleAPI):
    """Fetches impressions, clicks, CTR and position for a single page URL."""

    def build_query(self, today: Optional[date] = None) -> Dict[str, Any]:
        """Request body for the window ``[today - window_days, today]``."""
        end = today or date.today()
        start = end - timedelta(days=self.config.window_days)
        return {
            "startDate": start.isoformat(),
            "endDate": end.isoformat(),
            "dimensions": ["page"],
            "rowLimit": self.config.row_limit,
        }

    async def fetch_page_metrics(
        self,
        access_token: str,
        site_url: str,
        page_url: str,
        today: Optional[date] = None,
    ) -> PageMetric:
        if not site_url:
            raise MissingParameter("Site URL is required")
        if not page_url:
            raise MissingParameter("Page URL is required")

        path = f"/sites/{quote(site_url, safe='')}/searchAnalytics/query"
        data = await self._call("POST", path, access_token, self.build_query(today))
        rows = data.get("rows") or []
        if not isinstance(rows, list):
            raise UpstreamUnavailable("Search Console returned an unexpected payload")

        row = _find_row(rows, page_url)
        if row is None:
            if len(rows) >= self.config.row_limit:
                logger.debug("%s not among the top %d rows for %s", page_url, len(rows), site_url)
            return PageMetric.empty()
        try:
            return PageMetric.from_row(row)
        except (TypeError, ValueError) as exc:
            logger.error("Malformed Search Console row for %s: %r", page_url, row)
            raise UpstreamUnavailable("Search Console returned an unexpected row") from exc


def _find_row(rows: Iterable[Dict[str, Any]], page_url: str) -> Optional[Dict[str, Any]]:
    # byte-for-byte match; no slash or scheme normalization
    for row in rows:
        if not isinstance(row, dict):
            continue
        keys = row.get("keys")
        if isinstance(keys, list) and keys and keys[0] == page_url:
            return row
    return None


__all__ = ["MetricsFetcher"]
