"""seo_scout.crawler: обход дерева sitemap."""
from seo_scout.crawler.sitemap_crawler import SitemapCrawler

__all__ = ["SitemapCrawler"]
