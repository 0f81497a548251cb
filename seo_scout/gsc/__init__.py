"""seo_scout.gsc: клиенты Google Search Console."""
from seo_scout.gsc.metrics import MetricsFetcher
from seo_scout.gsc.properties import PropertyLister

__all__ = ["MetricsFetcher", "PropertyLister"]
