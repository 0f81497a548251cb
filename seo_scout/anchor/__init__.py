"""seo_scout.anchor: генерация анкор-текста для внутренних ссылок."""
from seo_scout.anchor.generator import AnchorTextGenerator

__all__ = ["AnchorTextGenerator"]
