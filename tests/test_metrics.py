# File: tests/test_metrics.py
"""Тесты MetricsFetcher и PropertyLister против фейкового Search Console API."""
from __future__ import annotations

from datetime import date

import pytest
import pytest_asyncio
from aiohttp import web

from seo_scout.errors import MissingParameter, UpstreamAuthError, UpstreamUnavailable
from seo_scout.gsc.metrics import MetricsFetcher
from seo_scout.gsc.properties import PropertyLister
from seo_scout.models import PageMetric

ROWS = [
    {"keys": ["https://example.com/"], "impressions": 900, "clicks": 80, "ctr": 0.0889, "position": 3.1},
    {"keys": ["https://example.com/a"], "impressions": 42, "clicks": 3, "ctr": 0.07, "position": 5.2},
    {"keys": ["https://example.com/b/"], "impressions": 10, "clicks": 0, "ctr": 0.0, "position": 14.0},
]


@pytest_asyncio.fixture
async def gsc_server(serve):
    """Search Console stand-in; behaviour is switched through ``state``."""
    state = {"status": 200, "payload": {"rows": ROWS}, "requests": []}

    async def handle(request: web.Request) -> web.Response:
        body = await request.json() if request.can_read_body else None
        state["requests"].append(
            {
                "method": request.method,
                "raw_path": request.raw_path,
                "auth": request.headers.get("Authorization"),
                "body": body,
            }
        )
        return web.json_response(state["payload"], status=state["status"])

    app = web.Application()
    app.router.add_route("*", "/{tail:.*}", handle)
    base = await serve(app)
    return base, state


async def fetch(config, *args, **kwargs) -> PageMetric:
    async with MetricsFetcher(config) as fetcher:
        return await fetcher.fetch_page_metrics(*args, **kwargs)


# --------------------------------------------------------------------------- #
#                                   Tests                                     #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_exact_match_returns_row_values(gsc_server, search_console_config):
    base, _ = gsc_server
    metric = await fetch(search_console_config(base), "tok1", "https://example.com/", "https://example.com/a")

    assert (metric.impressions, metric.clicks, metric.ctr, metric.position) == (42, 3, 0.07, 5.2)
    assert metric.no_data is False


@pytest.mark.asyncio()
async def test_missing_page_returns_zero_sentinel(gsc_server, search_console_config):
    base, _ = gsc_server
    metric = await fetch(search_console_config(base), "tok1", "https://example.com/", "https://example.com/missing")

    assert (metric.impressions, metric.clicks, metric.ctr, metric.position) == (0, 0, 0, 0)
    assert metric.no_data is True
    assert metric == PageMetric.empty()


@pytest.mark.asyncio()
@pytest.mark.parametrize(
    "page_url",
    ["https://example.com/b", "http://example.com/a", "https://example.com/a/"],
)
async def test_match_is_not_normalized(gsc_server, search_console_config, page_url):
    base, _ = gsc_server
    metric = await fetch(search_console_config(base), "tok1", "https://example.com/", page_url)
    assert metric.no_data is True


@pytest.mark.asyncio()
async def test_response_without_rows_is_sentinel(gsc_server, search_console_config):
    base, state = gsc_server
    state["payload"] = {"responseAggregationType": "byPage"}
    metric = await fetch(search_console_config(base), "tok1", "sc-domain:example.com", "https://example.com/a")
    assert metric == PageMetric.empty()


@pytest.mark.asyncio()
async def test_request_shape(gsc_server, search_console_config):
    base, state = gsc_server
    await fetch(
        search_console_config(base), "tok1", "https://example.com/", "https://example.com/a", today=date(2024, 5, 10)
    )

    request = state["requests"][0]
    assert request["method"] == "POST"
    assert request["auth"] == "Bearer tok1"
    assert request["raw_path"].endswith("/searchAnalytics/query")
    assert "%2F%2Fexample.com%2F" in request["raw_path"]
    assert request["body"] == {
        "startDate": "2024-05-03",
        "endDate": "2024-05-10",
        "dimensions": ["page"],
        "rowLimit": 1000,
    }


def test_window_follows_configuration(search_console_config):
    fetcher = MetricsFetcher(search_console_config("http://unused", window_days=28, row_limit=500))
    query = fetcher.build_query(date(2024, 3, 1))
    assert query["startDate"] == "2024-02-02"
    assert query["endDate"] == "2024-03-01"
    assert query["rowLimit"] == 500


@pytest.mark.asyncio()
async def test_page_beyond_row_limit_reports_sentinel(gsc_server, search_console_config):
    base, state = gsc_server
    state["payload"] = {
        "rows": [{"keys": [f"https://example.com/p{i}"], "impressions": 1, "clicks": 0, "ctr": 0, "position": 9} for i in range(3)]
    }
    metric = await fetch(
        search_console_config(base, row_limit=3), "tok1", "https://example.com/", "https://example.com/p99"
    )
    assert metric == PageMetric.empty()


@pytest.mark.asyncio()
@pytest.mark.parametrize(
    "bad_row",
    [
        {"keys": ["https://example.com/a"], "impressions": None},
        {"keys": ["https://example.com/a"], "impressions": "n/a"},
        {"keys": ["https://example.com/a"], "clicks": [1, 2]},
    ],
)
async def test_malformed_matching_row_is_unavailable(gsc_server, search_console_config, bad_row):
    base, state = gsc_server
    state["payload"] = {"rows": [bad_row]}

    with pytest.raises(UpstreamUnavailable):
        await fetch(search_console_config(base), "tok1", "https://example.com/", "https://example.com/a")


@pytest.mark.asyncio()
async def test_junk_rows_are_skipped(gsc_server, search_console_config):
    base, state = gsc_server
    state["payload"] = {"rows": ["junk", None, {"keys": "https://example.com/a"}, {"impressions": 5}, *ROWS]}

    metric = await fetch(search_console_config(base), "tok1", "https://example.com/", "https://example.com/a")
    assert (metric.impressions, metric.clicks) == (42, 3)

    state["payload"] = {"rows": ["junk"]}
    metric = await fetch(search_console_config(base), "tok1", "https://example.com/", "https://example.com/a")
    assert metric == PageMetric.empty()


@pytest.mark.asyncio()
async def test_rows_not_a_list_is_unavailable(gsc_server, search_console_config):
    base, state = gsc_server
    state["payload"] = {"rows": 7}

    with pytest.raises(UpstreamUnavailable):
        await fetch(search_console_config(base), "tok1", "https://example.com/", "https://example.com/a")


@pytest.mark.asyncio()
@pytest.mark.parametrize("status", [401, 403])
async def test_rejected_token_is_auth_error(gsc_server, search_console_config, status):
    base, state = gsc_server
    state["status"] = status
    state["payload"] = {"error": {"code": status, "message": "Request had invalid authentication credentials."}}

    with pytest.raises(UpstreamAuthError) as exc_info:
        await fetch(search_console_config(base), "expired", "https://example.com/", "https://example.com/a")
    assert exc_info.value.status == status


@pytest.mark.asyncio()
@pytest.mark.parametrize("status", [400, 429, 500, 503])
async def test_other_failures_are_unavailable(gsc_server, search_console_config, status):
    base, state = gsc_server
    state["status"] = status
    state["payload"] = {"error": {"code": status, "message": "nope"}}

    with pytest.raises(UpstreamUnavailable) as exc_info:
        await fetch(search_console_config(base), "tok1", "https://example.com/", "https://example.com/a")
    assert exc_info.value.status == status


@pytest.mark.asyncio()
async def test_error_body_with_ok_status(gsc_server, search_console_config):
    base, state = gsc_server
    state["payload"] = {"error": {"code": 401, "message": "Invalid Credentials"}}

    with pytest.raises(UpstreamAuthError):
        await fetch(search_console_config(base), "tok1", "https://example.com/", "https://example.com/a")


@pytest.mark.asyncio()
async def test_unreachable_api_is_unavailable(unused_tcp_port, search_console_config):
    config = search_console_config(f"http://127.0.0.1:{unused_tcp_port}")
    with pytest.raises(UpstreamUnavailable):
        await fetch(config, "tok1", "https://example.com/", "https://example.com/a")


@pytest.mark.asyncio()
@pytest.mark.parametrize(
    "args",
    [
        ("", "https://example.com/", "https://example.com/a"),
        ("tok1", "", "https://example.com/a"),
        ("tok1", "https://example.com/", ""),
    ],
)
async def test_missing_parameters(gsc_server, search_console_config, args):
    base, state = gsc_server
    with pytest.raises(MissingParameter):
        await fetch(search_console_config(base), *args)
    assert state["requests"] == []


@pytest.mark.asyncio()
async def test_list_properties_keeps_owner_and_full_user(gsc_server, search_console_config):
    base, state = gsc_server
    state["payload"] = {
        "siteEntry": [
            {"siteUrl": "https://example.com/", "permissionLevel": "siteOwner"},
            {"siteUrl": "sc-domain:example.org", "permissionLevel": "siteFullUser"},
            {"siteUrl": "https://restricted.example/", "permissionLevel": "siteRestrictedUser"},
            {"siteUrl": "https://pending.example/", "permissionLevel": "siteUnverifiedUser"},
        ]
    }

    async with PropertyLister(search_console_config(base)) as lister:
        properties = await lister.list_properties("tok1")

    assert [p.site_url for p in properties] == ["https://example.com/", "sc-domain:example.org"]
    assert state["requests"][0]["method"] == "GET"
    assert state["requests"][0]["raw_path"] == "/sites"


@pytest.mark.asyncio()
async def test_list_properties_empty_account(gsc_server, search_console_config):
    base, state = gsc_server
    state["payload"] = {}
    async with PropertyLister(search_console_config(base)) as lister:
        assert await lister.list_properties("tok1") == []
