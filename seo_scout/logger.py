"""Логгер SeoScout.

Все модули пишут в один логгер ``"SeoScout"``::

    from seo_scout.logger import logger

Вывод идёт в stderr, потому что stdout занят JSON-ответами CLI. Токены и
ключи API в лог не попадают: компоненты логируют только признаки наличия
и сроки жизни.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Union

LOGGER_NAME = "SeoScout"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

logger: logging.Logger = logging.getLogger(LOGGER_NAME)


def init_logging(level: Union[int, str] = "INFO", log_file: Union[str, Path, None] = None) -> logging.Logger:
    """Настраивает логгер для одного запуска CLI; повторный вызов заменяет обработчики."""
    formatter = logging.Formatter(LOG_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        # ротация: 5 МБ, три архива
        handlers.append(RotatingFileHandler(str(log_file), maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"))

    logger.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


__all__ = ["logger", "init_logging", "LOGGER_NAME"]
