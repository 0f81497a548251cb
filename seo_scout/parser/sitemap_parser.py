# File: seo_scout/parser/sitemap_parser.py
"""seo_scout.parser.sitemap_parser: Разбор sitemap-index и urlset документов."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Union

from lxml import etree

DocumentKind = Literal["sitemapindex", "urlset", "unknown"]

_ENTRY_TAG = {"sitemapindex": "sitemap", "urlset": "url"}


@dataclass(slots=True)
class SitemapDocument:
    """Тип документа и значения ``<loc>`` его записей в порядке документа."""

    kind: DocumentKind
    locs: List[str] = field(default_factory=list)


def _parse_root(content: Union[str, bytes]):
    raw = content.encode("utf-8") if isinstance(content, str) else content
    if not raw or not raw.strip():
        return None
    parser = etree.XMLParser(ns_clean=True, recover=True, resolve_entities=False, no_network=True)
    try:
        return etree.fromstring(raw, parser=parser)
    except etree.XMLSyntaxError:
        return None


def parse_sitemap_document(content: Union[str, bytes]) -> SitemapDocument:
    """Разбирает XML sitemap и возвращает SitemapDocument.

    Для ``<sitemapindex>`` собираются ``sitemap > loc``, для ``<urlset>``:
    ``url > loc``. Пространства имён игнорируются. Документ с одной записью
    даёт список из одного элемента. Нечитаемый XML или неизвестный корневой
    тег дают ``kind="unknown"`` и пустой список, без исключения.

    Пример:
    ```python
    from seo_scout.parser.sitemap_parser import parse_sitemap_document

    with open('sitemap_index.xml', 'rb') as f:
        doc = parse_sitemap_document(f.read())
    print(doc.kind, doc.locs)
    ```
    """
    root = _parse_root(content)
    if root is None or not isinstance(root.tag, str):
        return SitemapDocument("unknown")

    kind = etree.QName(root).localname
    entry_tag = _ENTRY_TAG.get(kind)
    if entry_tag is None:
        return SitemapDocument("unknown")

    locs: List[str] = []
    for entry in root.findall(f"{{*}}{entry_tag}"):
        loc = entry.find("{*}loc")
        if loc is not None and loc.text and loc.text.strip():
            locs.append(loc.text.strip())
    return SitemapDocument(kind, locs)  # type: ignore[arg-type]


__all__ = ["SitemapDocument", "parse_sitemap_document"]
