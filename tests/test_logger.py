# File: tests/test_logger.py
import logging
import sys
from logging.handlers import RotatingFileHandler

import pytest

import seo_scout.anchor.generator
import seo_scout.auth.token_broker
import seo_scout.crawler.sitemap_crawler
import seo_scout.gsc.api
import seo_scout.gsc.metrics
from seo_scout.logger import LOGGER_NAME, init_logging, logger


@pytest.fixture(autouse=True)
def _restore_logger():
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


def test_console_only_goes_to_stderr():
    lg = init_logging("DEBUG")
    assert lg is logger
    assert lg.level == logging.DEBUG
    assert len(lg.handlers) == 1
    assert lg.handlers[0].stream is sys.stderr
    assert lg.propagate is False


def test_log_file_is_written(tmp_path):
    log_file = tmp_path / "seo.log"
    init_logging("INFO", log_file)
    assert any(isinstance(h, RotatingFileHandler) for h in logger.handlers)

    logger.info("crawl started")
    logger.debug("hidden")
    for handler in logger.handlers:
        handler.flush()

    text = log_file.read_text(encoding="utf-8")
    assert f"| INFO     | {LOGGER_NAME} | crawl started" in text
    assert "hidden" not in text


def test_repeated_init_replaces_handlers(tmp_path):
    init_logging("INFO", tmp_path / "a.log")
    init_logging("WARNING")
    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING


@pytest.mark.parametrize(
    "module",
    [
        seo_scout.anchor.generator,
        seo_scout.auth.token_broker,
        seo_scout.crawler.sitemap_crawler,
        seo_scout.gsc.api,
        seo_scout.gsc.metrics,
    ],
)
def test_components_share_project_logger(module):
    assert module.logger is logger
