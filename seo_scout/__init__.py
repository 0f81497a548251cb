# seo_scout/__init__.py
"""
SeoScout package initializer.
Defines package version and exposes the four core components.
"""
__version__ = "0.1.0"

from seo_scout.anchor.generator import AnchorTextGenerator
from seo_scout.auth.token_broker import TokenBroker
from seo_scout.crawler.sitemap_crawler import SitemapCrawler
from seo_scout.gsc.metrics import MetricsFetcher

__all__ = [
    "__version__",
    "AnchorTextGenerator",
    "TokenBroker",
    "SitemapCrawler",
    "MetricsFetcher",
]
