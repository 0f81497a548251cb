# File: tests/conftest.py
from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable

import pytest
import pytest_asyncio
from aiohttp import web

from seo_scout.config import (
    CrawlerConfig,
    GoogleOAuthConfig,
    LLMConfig,
    SearchConsoleConfig,
)

ServeApp = Callable[[web.Application], Awaitable[str]]

_SECRET_ENV = ("GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET", "GOOGLE_REDIRECT_URI", "OPENAI_API_KEY")


def pytest_configure(config):
    """Register custom markers so that `--strict-markers` does not fail."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )


@pytest.fixture(autouse=True)
def _clean_secret_env(monkeypatch):
    """Secrets from the developer's shell must not leak into tests."""
    for var in _SECRET_ENV:
        monkeypatch.delenv(var, raising=False)


@pytest_asyncio.fixture
async def serve(unused_tcp_port_factory) -> AsyncIterator[ServeApp]:
    """Start aiohttp apps on free ports; yields a starter returning the base URL."""
    runners: list[web.AppRunner] = []

    async def _start(app: web.Application) -> str:
        runner = web.AppRunner(app)
        await runner.setup()
        port = unused_tcp_port_factory()
        site = web.TCPSite(runner, "127.0.0.1", port)
        await site.start()
        runners.append(runner)
        return f"http://127.0.0.1:{port}"

    try:
        yield _start
    finally:
        for runner in runners:
            await runner.cleanup()


def _google_config(base: str, **overrides) -> GoogleOAuthConfig:
    """GoogleOAuthConfig whose token endpoint points at a local test server."""
    values = dict(
        client_id="test-client.apps.googleusercontent.com",
        client_secret="s3cret",
        redirect_uri="http://localhost:3000/gsc-callback",
        token_uri=f"{base}/token",
        timeout=2.0,
    )
    values.update(overrides)
    return GoogleOAuthConfig(**values)


def _search_console_config(base: str, **overrides) -> SearchConsoleConfig:
    values = dict(api_base=base, timeout=2.0)
    values.update(overrides)
    return SearchConsoleConfig(**values)


def _crawler_config(**overrides) -> CrawlerConfig:
    values = dict(timeout=2.0, user_agent="TestAgent/1.0", max_concurrency=5)
    values.update(overrides)
    return CrawlerConfig(**values)


def _llm_config(base: str, **overrides) -> LLMConfig:
    values = dict(model="gpt-4", api_key="sk-test", base_url=f"{base}/v1", timeout=2.0)
    values.update(overrides)
    return LLMConfig(**values)


@pytest.fixture()
def google_config():
    return _google_config


@pytest.fixture()
def search_console_config():
    return _search_console_config


@pytest.fixture()
def crawler_config():
    return _crawler_config


@pytest.fixture()
def llm_config():
    return _llm_config
