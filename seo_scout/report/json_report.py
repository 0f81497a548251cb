# seo_scout/report/json_report.py

"""
Генерация JSON-отчёта для проекта SeoScout.

Сериализация результата (CrawlResult, PageMetric, списков URL) в файл.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Union


def _to_jsonable(data: Any) -> Any:
    # модели SeoScout умеют сериализоваться сами
    if hasattr(data, "to_dict"):
        return data.to_dict()
    if isinstance(data, (list, tuple)):
        return [_to_jsonable(item) for item in data]
    return data


def render_json(data: Any, output_path: Union[Path, str], *, pretty: bool = True) -> Path:
    """
    Сохраняет data в формате JSON по указанному пути.

    :param data: CrawlResult, PageMetric, список или словарь
    :param output_path: путь к JSON-файлу
    :param pretty: отступ 2 пробела
    :return: Path сохранённого файла

    Пример:
    ```python
    from seo_scout.report.json_report import render_json
    report_path = render_json(crawl_result, 'reports/sitemap.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(_to_jsonable(data), f, ensure_ascii=False, indent=2 if pretty else None)

    return output
