"""Tests for the single-attempt probe."""

from __future__ import annotations

import asyncio

import httpx

from keepalive.engine.probe import ProbeOutcome, probe
from tests.helpers import make_transport


def _probe(transport: httpx.MockTransport, url: str, **client_kwargs) -> ProbeOutcome:
    async def go() -> ProbeOutcome:
        async with httpx.AsyncClient(transport=transport, **client_kwargs) as client:
            return await probe(client, url)

    return asyncio.run(go())


class TestProbe:
    def test_success(self) -> None:
        out = _probe(make_transport({"a.test": 200}), "https://a.test/")
        assert out.ok is True
        assert out.status == 200
        assert out.elapsed_ms is not None and out.elapsed_ms >= 0
        assert out.error is None

    def test_any_2xx_is_success(self) -> None:
        out = _probe(make_transport({"a.test": 204}), "https://a.test/")
        assert out.ok is True
        assert out.status == 204

    def test_server_error(self) -> None:
        out = _probe(make_transport({"a.test": 500}), "https://a.test/")
        assert out.ok is False
        assert out.error == "HTTP 500"
        assert out.elapsed_ms is None

    def test_client_error(self) -> None:
        out = _probe(make_transport({"a.test": 404}), "https://a.test/")
        assert out.ok is False
        assert out.error == "HTTP 404"

    def test_transport_error_text(self) -> None:
        out = _probe(make_transport({"a.test": httpx.ConnectError("connection refused")}), "https://a.test/")
        assert out.ok is False
        assert out.status is None
        assert out.error == "connection refused"

    def test_transport_error_without_text(self) -> None:
        out = _probe(make_transport({"a.test": httpx.ReadTimeout("")}), "https://a.test/")
        assert out.ok is False
        assert out.error == "ReadTimeout"

    def test_invalid_url_is_failure(self) -> None:
        out = _probe(make_transport({}), "not a url")
        assert out.ok is False
        assert out.error

    def test_follows_redirects(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/old":
                return httpx.Response(301, headers={"Location": "https://a.test/new"})
            return httpx.Response(200)

        out = _probe(httpx.MockTransport(handler), "https://a.test/old", follow_redirects=True)
        assert out.ok is True
        assert out.status == 200
