import asyncio
import logging

import aiohttp
import requests

from jvms_prolog.workflows import page_fetch
from jvms_prolog.workflows.page_fetch import FetchConfig, PageFetcher, PageResult


class _FakeResponse:
    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self._body = body

    async def text(self, errors: str = "strict") -> str:
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class _FakeSession:
    def __init__(self, responses) -> None:
        self.responses = responses
        self.requested = []

    def get(self, url, **kwargs):
        self.requested.append(url)
        outcome = self.responses[url]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def test_fetch_returns_html_on_success():
    session = _FakeSession({"https://example.com/se8": _FakeResponse(200, "<html>ok</html>")})
    result = asyncio.run(PageFetcher().fetch(session, "https://example.com/se8"))
    assert result.ok
    assert result.status == 200
    assert result.html == "<html>ok</html>"


def test_fetch_reports_http_error_as_failure(caplog):
    session = _FakeSession({"https://example.com/se6": _FakeResponse(404, "not found")})
    with caplog.at_level(logging.WARNING, logger="jvms_prolog.workflows.page_fetch"):
        result = asyncio.run(PageFetcher().fetch(session, "https://example.com/se6"))
    warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert any("https://example.com/se6" in msg and "http_404" in msg for msg in warnings)
    assert not result.ok
    assert result.status == 404
    assert result.error == "http_404"
    assert result.html == ""


def test_fetch_reports_client_error_as_failure():
    session = _FakeSession({"https://example.com/down": aiohttp.ClientConnectionError("refused")})
    result = asyncio.run(PageFetcher().fetch(session, "https://example.com/down"))
    assert not result.ok
    assert result.status == -1
    assert "ClientConnectionError" in result.error


def test_fetch_reports_timeout_as_failure():
    session = _FakeSession({"https://example.com/slow": asyncio.TimeoutError()})
    result = asyncio.run(PageFetcher().fetch(session, "https://example.com/slow"))
    assert result.error == "timeout"


def test_fetch_many_keeps_input_order_and_isolates_failures(monkeypatch):
    async def fake_fetch(self, session, url):
        if url.endswith("9"):
            await asyncio.sleep(0.01)
        if url.endswith("8"):
            return PageResult(url=url, status=404, html="", fetched_at="now", error="http_404")
        return PageResult(url=url, status=200, html=f"<p>{url}</p>", fetched_at="now")

    monkeypatch.setattr(PageFetcher, "fetch", fake_fetch)
    urls = ["https://example.com/7", "https://example.com/8", "https://example.com/9"]
    results = asyncio.run(PageFetcher().fetch_many(urls))

    assert [r.url for r in results] == urls
    assert [r.ok for r in results] == [True, False, True]


def test_fetch_many_empty():
    assert asyncio.run(PageFetcher().fetch_many([])) == []


def test_fetch_page_uses_requests(monkeypatch):
    calls = {}

    class _Resp:
        status_code = 200
        text = "<html>sync</html>"

    def fake_get(url, headers=None, timeout=None):
        calls["url"] = url
        calls["headers"] = headers
        calls["timeout"] = timeout
        return _Resp()

    monkeypatch.setattr(page_fetch.requests, "get", fake_get)
    result = page_fetch.fetch_page("https://example.com/se21", FetchConfig(user_agent="test-agent"))

    assert result.ok
    assert result.html == "<html>sync</html>"
    assert calls["headers"]["User-Agent"] == "test-agent"
    assert calls["timeout"] is None


def test_fetch_page_failure(monkeypatch):
    def fake_get(url, headers=None, timeout=None):
        raise requests.ConnectionError("no route")

    monkeypatch.setattr(page_fetch.requests, "get", fake_get)
    result = page_fetch.fetch_page("https://example.com/se21")
    assert not result.ok
    assert "ConnectionError" in result.error
