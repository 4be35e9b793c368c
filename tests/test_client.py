"""Tests for allow-list fetching, configuration and HTTP routes."""

import asyncio

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from referer_parser.client import AllowListClient, fetch_allow_list
from referer_parser.config import ConfigError, ParserConfig
from referer_parser.database import build_database
from referer_parser.parser import Parser
from referer_parser.routes import create_classify_router

ALLOW_LIST_URL = "https://assets.example.com/internals.txt"

ALLOW_LIST_BODY = """\
# Internal hosts for example.com
*.vodafone.nl
_partial_matches_
myaccount.example.com   # account pages
"""


def run_async(coro):
    """Helper to run async functions in sync tests."""
    return asyncio.run(coro)


def _transport(status_code=200, body=ALLOW_LIST_BODY):
    def handler(request):
        return httpx.Response(status_code, text=body)
    return httpx.MockTransport(handler)


class TestFetchAllowList:
    """Test the allow-list fetch collaborator."""

    def test_fetch_parses_lines(self):
        entries = run_async(fetch_allow_list(ALLOW_LIST_URL, transport=_transport()))
        assert entries == ("*.vodafone.nl", "_partial_matches_", "myaccount.example.com")

    def test_http_error_status_returns_none(self):
        entries = run_async(fetch_allow_list(ALLOW_LIST_URL, transport=_transport(status_code=404)))
        assert entries is None

    def test_connection_error_returns_none(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        transport = httpx.MockTransport(handler)
        assert run_async(fetch_allow_list(ALLOW_LIST_URL, transport=transport)) is None

    def test_body_with_byte_order_mark(self):
        transport = _transport(body="\ufeff*.vodafone.nl\nshop.example.org\n")
        entries = run_async(fetch_allow_list(ALLOW_LIST_URL, transport=transport))
        assert entries == ("*.vodafone.nl", "shop.example.org")

    def test_empty_body(self):
        entries = run_async(fetch_allow_list(ALLOW_LIST_URL, transport=_transport(body="")))
        assert entries == ()

    def test_requests_the_configured_url(self):
        seen = []

        def handler(request):
            seen.append(str(request.url))
            return httpx.Response(200, text="")

        client = AllowListClient(ALLOW_LIST_URL, transport=httpx.MockTransport(handler))
        run_async(client.fetch())
        assert seen == [ALLOW_LIST_URL]

    def test_rejects_non_http_url(self):
        with pytest.raises(ConfigError):
            AllowListClient("ftp://example.com/internals.txt")


class TestParserConfig:
    """Test ParserConfig validation."""

    def test_defaults(self):
        config = ParserConfig()
        assert config.has_allow_list is False
        assert config.internal_ignore_case is True

    @pytest.mark.parametrize("timeout", [0, -1.5])
    def test_non_positive_timeout(self, timeout):
        with pytest.raises(ConfigError):
            ParserConfig(allow_list_timeout=timeout)

    def test_invalid_allow_list_url(self):
        with pytest.raises(ConfigError):
            ParserConfig(allow_list_url="internals.txt")

    def test_plain_http_allow_list_warns(self):
        with pytest.warns(UserWarning, match="plain http"):
            config = ParserConfig(allow_list_url="http://example.com/internals.txt")
        assert config.has_allow_list is True


class TestClassifyRoute:
    """Test the FastAPI classification router."""

    def _client(self):
        database = build_database({
            "search": {"Google": {"domains": ["www.google.com"], "parameters": ["q"]}},
        })
        app = FastAPI()
        app.include_router(create_classify_router(Parser(database=database)))
        return TestClient(app)

    def test_search_referer(self):
        response = self._client().get(
            "/classify",
            params={"referer": "http://www.google.com/search?q=hello+world", "page": "example.com"},
        )
        assert response.status_code == 200
        assert response.json() == {"medium": "search", "source": "Google", "search_term": "hello world"}

    def test_internal_referer(self):
        response = self._client().get(
            "/classify",
            params={"referer": "https://example.com/a", "page": "https://example.com/b"},
        )
        assert response.json()["medium"] == "internal"

    def test_not_a_referer(self):
        response = self._client().get("/classify", params={"referer": "ftp://example.com/"})
        assert response.status_code == 200
        assert response.json() == {"medium": None, "source": None, "search_term": None}

    def test_missing_referer(self):
        response = self._client().get("/classify")
        assert response.json()["medium"] is None
