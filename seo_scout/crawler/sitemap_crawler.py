# === FILE: seo_scout/crawler/sitemap_crawler.py ===
from __future__ import annotations

import asyncio
import time
from typing import List, Optional, Tuple

from aiohttp import ClientError, ClientSession

from seo_scout.config import CrawlerConfig
from seo_scout.errors import UpstreamUnavailable
from seo_scout.http import SessionOwner
from seo_scout.logger import logger
from seo_scout.models import ChildSitemapFailure, CrawlResult
from seo_scout.parser.sitemap_parser import parse_sitemap_document
from seo_scout.utils import remove_duplicates, sitemap_url_for

__all__ = ("SitemapCrawler",)

_ChildOutcome = Tuple[Optional[List[str]], Optional[str]]


class SitemapCrawler(SessionOwner):
    """Двухуровневый обход: sitemap-index -> дочерние urlset -> плоский список URL."""

    def __init__(self, config: CrawlerConfig, session: Optional[ClientSession] = None) -> None:
        super().__init__(config.timeout, session, headers={"User-Agent": config.user_agent})
        self.config = config

    async def crawl_site(self, site_url: str) -> CrawlResult:
        """Crawl ``<site>/sitemap.xml`` for a bare site URL or Search Console property."""
        return await self.crawl(sitemap_url_for(site_url))

    async def crawl(self, index_url: str) -> CrawlResult:
        """Fetch the index, fan out over child sitemaps and flatten their page URLs.

        Only a failure of the root document is fatal (UpstreamUnavailable).
        Child failures are recorded on the result and logged as warnings.
        """
        logger.info("Старт обхода sitemap: %s", index_url)
        start = time.monotonic()

        try:
            body = await self._get(index_url)
        except _FetchError as exc:
            logger.error("Sitemap index %s unavailable: %s", index_url, exc)
            raise UpstreamUnavailable(f"Could not fetch sitemap {index_url}: {exc}", status=exc.status) from exc

        doc = parse_sitemap_document(body)
        result = CrawlResult()
        if doc.kind == "urlset":
            # корневой документ сам является urlset
            result.urls = remove_duplicates(doc.locs)
        elif doc.kind == "sitemapindex":
            children = doc.locs
            logger.debug("Index %s lists %d child sitemaps", index_url, len(children))
            outcomes = await self._fetch_children(children)
            for child_url, (urls, error) in zip(children, outcomes):
                if error is not None:
                    logger.warning("Child sitemap %s skipped: %s", child_url, error)
                    result.failures.append(ChildSitemapFailure(child_url, error))
                else:
                    result.urls.extend(urls or [])
        else:
            logger.warning("Sitemap %s is neither an index nor a urlset; no URLs found", index_url)

        duration = time.monotonic() - start
        logger.info(
            "Завершено: %d URL за %.2f с (ошибок в дочерних sitemap: %d)",
            len(result.urls), duration, len(result.failures),
        )
        return result

    async def _fetch_children(self, children: List[str]) -> List[_ChildOutcome]:
        semaphore = asyncio.Semaphore(self.config.max_concurrency)

        async def _one(url: str) -> _ChildOutcome:
            async with semaphore:
                return await self._fetch_child(url)

        # gather preserves input order regardless of completion order
        return list(await asyncio.gather(*(_one(u) for u in children)))

    async def _fetch_child(self, url: str) -> _ChildOutcome:
        try:
            body = await self._get(url)
        except _FetchError as exc:
            return None, str(exc)
        doc = parse_sitemap_document(body)
        if doc.kind != "urlset":
            return None, "not a urlset document"
        return remove_duplicates(doc.locs), None

    async def _get(self, url: str) -> bytes:
        """GET ``url`` and return the raw body of a 2xx response."""
        session = self._require_session()
        try:
            async with session.get(url, timeout=self._request_timeout()) as resp:
                if not 200 <= resp.status < 300:
                    raise _FetchError(f"HTTP {resp.status}", status=resp.status)
                return await resp.read()
        except asyncio.TimeoutError as exc:
            raise _FetchError(f"timed out after {self.timeout:g}s") from exc
        except ClientError as exc:
            raise _FetchError(f"{type(exc).__name__}: {exc}") from exc


class _FetchError(Exception):
    def __init__(self, reason: str, status: Optional[int] = None) -> None:
        super().__init__(reason)
        self.status = status
