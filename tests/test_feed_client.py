from __future__ import annotations

import asyncio
from typing import Callable, List

import httpx

from models.records import (
    Canonical,
    FailureKind,
    HttpFailure,
    Malformed,
    NetworkFailure,
    RemoteError,
)
from services.feed import FeedClient

from tests.helpers import FEED_URL, FIXED_NOW, canonical_payload


def _fetch(handler: Callable[[httpx.Request], httpx.Response]):
    async def run():
        client = FeedClient(FEED_URL, timeout=1.0, transport=httpx.MockTransport(handler))
        try:
            return await client.fetch(FIXED_NOW)
        finally:
            await client.aclose()

    return asyncio.run(run())


def test_fetch_sends_no_cache_json_request() -> None:
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=canonical_payload(4))

    outcome = _fetch(handler)

    assert isinstance(outcome, Canonical)
    assert len(outcome.readings) == 4
    (request,) = seen
    assert request.method == "GET"
    assert str(request.url) == FEED_URL
    assert request.headers["accept"] == "application/json"
    assert request.headers["cache-control"] == "no-cache"


def test_fetch_follows_redirects() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "feed.test":
            return httpx.Response(302, headers={"location": "https://cdn.feed.test/data"})
        return httpx.Response(200, json={"error": "quota exceeded"})

    outcome = _fetch(handler)

    assert isinstance(outcome, RemoteError)
    assert "quota exceeded" in outcome.reason


def test_non_success_status_is_http_failure() -> None:
    outcome = _fetch(lambda request: httpx.Response(503, text="busy"))

    assert isinstance(outcome, HttpFailure)
    assert outcome.kind is FailureKind.http
    assert outcome.status_code == 503
    assert outcome.reason == "HTTP 503: Service Unavailable"


def test_connection_error_is_network_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    outcome = _fetch(handler)

    assert isinstance(outcome, NetworkFailure)
    assert "connection refused" in outcome.reason


def test_timeout_is_network_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    outcome = _fetch(handler)

    assert isinstance(outcome, NetworkFailure)
    assert outcome.reason == "Request timed out"


def test_html_body_is_malformed() -> None:
    outcome = _fetch(lambda request: httpx.Response(200, text="<!doctype html><p>Sign in</p>"))

    assert isinstance(outcome, Malformed)
