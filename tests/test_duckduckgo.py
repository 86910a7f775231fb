"""Tests for the DuckDuckGo HTML backend."""

from urllib.parse import parse_qs

import httpx
import pytest

from scrapeproxy.exceptions import NetworkError, ScrapeProxyError
from scrapeproxy.search.providers.duckduckgo import DuckDuckGoBackend, parse_results
from scrapeproxy.utils.user_agents import USER_AGENTS

from .conftest import mock_client


def result_block(href: str, title: str, snippet: str | None = None) -> str:
    snippet_html = f'<a class="result__snippet" href="{href}">{snippet}</a>' if snippet is not None else ""
    return (
        '<div class="result results_links web-result">'
        '<div class="links_main result__body">'
        f'<h2 class="result__title"><a rel="nofollow" class="result__a" href="{href}">{title}</a></h2>'
        f"{snippet_html}"
        "</div></div>"
    )


def results_page(*blocks: str) -> str:
    return f'<html><body><div id="links" class="results">{"".join(blocks)}</div></body></html>'


def test_parse_results_extracts_title_url_snippet():
    html = results_page(
        result_block("https://doc.rust-lang.org/book/ch04-01.html", "What is <b>Ownership</b>?", "  Rust's central feature  "),
        result_block("https://example.com/ownership", "Ownership explained"),
    )
    results = parse_results(html)

    assert [r.url for r in results] == [
        "https://doc.rust-lang.org/book/ch04-01.html",
        "https://example.com/ownership",
    ]
    assert results[0].title == "What is Ownership?"
    assert results[0].snippet == "Rust's central feature"
    assert results[1].snippet == ""


def test_parse_results_filters_relative_ads_duplicates_and_blank_titles():
    html = results_page(
        result_block("//duckduckgo.com/l/?uddg=https%3A%2F%2Fa.example", "Relative redirect"),
        result_block("https://duckduckgo.com/y.js?ad_provider=x", "Sponsored"),
        result_block("https://a.example/", "First"),
        result_block("https://a.example/", "First again"),
        result_block("https://blank.example/", "   "),
        result_block("https://b.example/", "Second"),
    )
    results = parse_results(html)

    assert [r.title for r in results] == ["First", "Second"]


def test_parse_results_stops_at_ten():
    html = results_page(*(result_block(f"https://site{i}.example/", f"Result {i}") for i in range(15)))
    results = parse_results(html)

    assert len(results) == 10
    assert results[-1].url == "https://site9.example/"
    assert len({r.url for r in results}) == 10
    assert all(r.url.startswith("http") for r in results)


def test_parse_results_empty_page():
    assert parse_results("") == []
    assert parse_results("<html><body>No results.</body></html>") == []


@pytest.mark.asyncio
async def test_search_posts_form_with_rotated_user_agent():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["form"] = parse_qs(request.content.decode())
        seen["ua"] = request.headers["user-agent"]
        seen["content_type"] = request.headers["content-type"]
        return httpx.Response(200, text=results_page(result_block("https://a.example/", "rust ownership")))

    async with mock_client(handler) as client:
        results = await DuckDuckGoBackend(client).search("rust ownership")

    assert seen["method"] == "POST"
    assert seen["url"] == "https://html.duckduckgo.com/html/"
    assert seen["form"] == {"q": ["rust ownership"]}
    assert seen["ua"] in USER_AGENTS
    assert seen["content_type"] == "application/x-www-form-urlencoded"
    assert len(results) == 1


@pytest.mark.asyncio
async def test_search_raises_on_error_status():
    async with mock_client(lambda request: httpx.Response(503, text="busy")) as client:
        with pytest.raises(ScrapeProxyError, match="503"):
            await DuckDuckGoBackend(client).search("q")


@pytest.mark.asyncio
async def test_search_raises_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with mock_client(handler) as client:
        with pytest.raises(NetworkError):
            await DuckDuckGoBackend(client).search("q")
