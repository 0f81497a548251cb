"""seo_scout.report: сохранение результатов (JSON) для CLI и тестов."""
from seo_scout.report.json_report import render_json

__all__ = ["render_json"]
