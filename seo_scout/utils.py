"""seo_scout.utils: Утилитарные функции для обработки URL, slug и списков URL."""

from __future__ import annotations

import re
from typing import Collection, List, Sequence
from urllib.parse import unquote, urlparse, urlunparse

from seo_scout.errors import InvalidUrl
from seo_scout.logger import logger

__all__: Sequence[str] = (
    "parse_http_url",
    "derive_slug",
    "sitemap_url_for",
    "remove_duplicates",
)

_SEPARATORS_RE = re.compile(r"[-_]+")
_SPACES_RE = re.compile(r"\s+")


def parse_http_url(url: str):
    """Разбирает абсолютный http(s) URL; бросает InvalidUrl, если это невозможно."""
    if not url or not url.strip():
        raise InvalidUrl("URL is empty")
    try:
        parsed = urlparse(url.strip())
    except ValueError as exc:
        raise InvalidUrl(f"Cannot parse URL {url!r}: {exc}") from exc
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidUrl(f"Not an absolute http(s) URL: {url!r}")
    return parsed


def derive_slug(url: str) -> str:
    """Последний непустой сегмент пути, `-`/`_` заменены пробелами.

    ``https://example.com/blog/best-pizza-ovens/`` -> ``"best pizza ovens"``;
    для корня сайта возвращается пустая строка.
    """
    parsed = parse_http_url(url)
    segments = [s for s in parsed.path.split("/") if s.strip()]
    if not segments:
        return ""
    slug = _SEPARATORS_RE.sub(" ", unquote(segments[-1]))
    return _SPACES_RE.sub(" ", slug).strip()


def sitemap_url_for(site_url: str) -> str:
    """Строит адрес sitemap.xml по адресу сайта (`example.com` -> `https://example.com/sitemap.xml`).

    Если передан уже готовый адрес .xml, он возвращается без изменений.
    """
    if not site_url or not site_url.strip():
        raise InvalidUrl("Site URL is empty")
    raw = site_url.strip()
    if raw.startswith("sc-domain:"):
        raw = raw.removeprefix("sc-domain:")
    if not raw.startswith(("http://", "https://")):
        raw = f"https://{raw}"
    parsed = parse_http_url(raw)
    if parsed.path.lower().endswith(".xml"):
        return urlunparse((parsed.scheme, parsed.netloc, parsed.path, "", parsed.query, ""))
    base = urlunparse((parsed.scheme, parsed.netloc, parsed.path.rstrip("/"), "", "", ""))
    return f"{base}/sitemap.xml"


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Удаляет дубликаты из списка URL, сохраняя порядок."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
