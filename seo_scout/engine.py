# File: seo_scout/engine.py
"""seo_scout.engine: Orchestration layer: связывает компоненты и реализует политику повторов вызывающей стороны."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from seo_scout.anchor.generator import AnchorTextGenerator
from seo_scout.auth.token_broker import TokenBroker
from seo_scout.config import Settings, load_config
from seo_scout.crawler.sitemap_crawler import SitemapCrawler
from seo_scout.errors import UpstreamAuthError
from seo_scout.gsc.metrics import MetricsFetcher
from seo_scout.logger import logger
from seo_scout.models import AccessGrant, CrawlResult, PageMetric

__all__ = ["Engine", "MetricsOutcome"]


@dataclass(frozen=True, slots=True)
class MetricsOutcome:
    """Метрика страницы и, если пришлось обновлять токен, новый access token."""

    metric: PageMetric
    refreshed: Optional[AccessGrant] = None


class Engine:
    """Фасад для CLI и обработчиков запросов: компоненты не вызывают друг друга, их связывает Engine."""

    @staticmethod
    def load_config(path: Optional[str]) -> Settings:
        """Загружает конфиг из YAML/JSON или использует значения по умолчанию."""
        return load_config(path)

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def token_broker(self) -> TokenBroker:
        """TokenBroker с проверкой конфигурации: без client id или secret сразу ServerMisconfigured."""
        broker = TokenBroker(self.settings.google)
        broker.validate()
        return broker

    async def crawl(self, url: str) -> CrawlResult:
        """Обходит sitemap сайта (или явно указанный sitemap .xml)."""
        async with SitemapCrawler(self.settings.crawler) as crawler:
            return await crawler.crawl_site(url)

    async def page_metrics(
        self,
        access_token: str,
        site_url: str,
        page_url: str,
        refresh_token: Optional[str] = None,
        today: Optional[date] = None,
    ) -> MetricsOutcome:
        """Метрики страницы; при UpstreamAuthError один refresh и ровно один повтор.

        Вторая ошибка (или отсутствие refresh token) пробрасывается вызывающему
        как требование повторной авторизации.
        """
        # конфигурация OAuth проверяется до первого запроса к Search Console
        broker = self.token_broker() if refresh_token else None
        async with MetricsFetcher(self.settings.search_console) as fetcher:
            try:
                metric = await fetcher.fetch_page_metrics(access_token, site_url, page_url, today)
                return MetricsOutcome(metric)
            except UpstreamAuthError:
                if broker is None:
                    raise
                logger.info("Access token rejected; refreshing once and retrying")

            async with broker:
                grant = await broker.refresh_access_token(refresh_token)

            metric = await fetcher.fetch_page_metrics(grant.access_token, site_url, page_url, today)
            return MetricsOutcome(metric, refreshed=grant)

    async def anchor(self, page_url: str, page_title: Optional[str] = None, from_url: Optional[str] = None) -> str:
        async with AnchorTextGenerator(self.settings.llm) as generator:
            return await generator.generate_anchor(page_url, page_title, from_url)
