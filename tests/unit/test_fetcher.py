import asyncio
import json

import httpx
import pytest

from scarestamps.core.config import settings
from scarestamps.core.errors import FetchTimeoutError, FetchTransportError
from scarestamps.fetch.fetcher import fetch_document, fetch_json

URL = "https://notscare.me/movies/it-2017"

class TestFetchDocument:
    """Unit tests for the bounded remote fetch"""

    def test_success_returns_body(self):
        seen = {}

        def handler(request):
            seen.update(request.headers)
            return httpx.Response(200, text="<h1>It</h1>")

        outcome = asyncio.run(fetch_document(URL, transport=httpx.MockTransport(handler)))

        assert outcome.ok is True
        assert outcome.status == 200
        assert outcome.body == "<h1>It</h1>"
        assert seen["user-agent"] == settings.USER_AGENT
        assert seen["accept-language"] == settings.ACCEPT_LANGUAGE
        assert seen["accept"].startswith("text/html")

    def test_non_2xx_is_not_an_exception(self):
        handler = lambda request: httpx.Response(404, text="not found")
        outcome = asyncio.run(fetch_document(URL, transport=httpx.MockTransport(handler)))

        assert outcome.ok is False
        assert outcome.status == 404
        assert outcome.body == ""

    def test_deadline_expiry_raises_timeout(self):
        async def slow(request):
            await asyncio.sleep(1)
            return httpx.Response(200, text="late")

        with pytest.raises(FetchTimeoutError):
            asyncio.run(fetch_document(URL, timeout_ms=50, transport=httpx.MockTransport(slow)))

    def test_deadline_released_after_timeout(self):
        """The expired deadline must not cancel later work in the same task"""
        async def slow(request):
            await asyncio.sleep(1)
            return httpx.Response(200)

        async def scenario():
            with pytest.raises(FetchTimeoutError):
                await fetch_document(URL, timeout_ms=50, transport=httpx.MockTransport(slow))
            await asyncio.sleep(0.1)
            return "finished"

        assert asyncio.run(scenario()) == "finished"

    def test_deadline_released_after_success(self):
        async def scenario():
            handler = lambda request: httpx.Response(200, text="ok")
            outcome = await fetch_document(URL, timeout_ms=50, transport=httpx.MockTransport(handler))
            await asyncio.sleep(0.1)
            return outcome

        assert asyncio.run(scenario()).ok is True

    def test_default_timeout_from_settings(self):
        settings.FETCH_TIMEOUT_MS = 50

        async def slow(request):
            await asyncio.sleep(1)
            return httpx.Response(200)

        with pytest.raises(FetchTimeoutError):
            asyncio.run(fetch_document(URL, transport=httpx.MockTransport(slow)))

    def test_httpx_timeout_is_a_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("read timed out", request=request)

        with pytest.raises(FetchTimeoutError):
            asyncio.run(fetch_document(URL, transport=httpx.MockTransport(handler)))

    def test_connection_failure_is_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(FetchTransportError):
            asyncio.run(fetch_document(URL, transport=httpx.MockTransport(handler)))

class TestFetchJson:
    """Unit tests for the structured API variant"""

    def test_api_key_header_attached(self):
        seen = {}

        def handler(request):
            seen.update(request.headers)
            return httpx.Response(200, json={"results": []})

        outcome = asyncio.run(fetch_json(
            "https://notscare.me/api/movies?search=it",
            api_key="secret",
            api_key_header="X-API-Key",
            transport=httpx.MockTransport(handler),
        ))

        assert outcome.ok is True
        assert json.loads(outcome.body) == {"results": []}
        assert seen["x-api-key"] == "secret"
        assert seen["accept"].startswith("application/json")

    def test_no_key_no_header(self):
        seen = {}

        def handler(request):
            seen.update(request.headers)
            return httpx.Response(200, json=[])

        asyncio.run(fetch_json(
            "https://notscare.me/api/movies?search=it",
            api_key=None,
            api_key_header="X-API-Key",
            transport=httpx.MockTransport(handler),
        ))

        assert "x-api-key" not in seen
