"""Tests for the shared upstream client and streamed responses."""

from unittest.mock import patch

import httpx
import pytest

import upstream


@pytest.fixture(autouse=True)
def reset_client(monkeypatch):
    """Start every test without a shared client."""
    monkeypatch.setattr(upstream, "_client", None)


class TestGetClient:
    """Tests for get_client."""

    @pytest.mark.asyncio
    async def test_reuses_client(self):
        first = await upstream.get_client()
        second = await upstream.get_client()
        assert first is second
        await upstream.close_client()

    @pytest.mark.asyncio
    async def test_no_timeout(self):
        client = await upstream.get_client()
        assert client.timeout == httpx.Timeout(None)
        assert client.follow_redirects is True
        assert client.headers["Accept-Encoding"] == "identity"
        await upstream.close_client()

    @pytest.mark.asyncio
    async def test_recreated_after_close(self):
        first = await upstream.get_client()
        await upstream.close_client()
        assert first.is_closed
        second = await upstream.get_client()
        assert second is not first
        assert not second.is_closed
        await upstream.close_client()


class TestOpenStream:
    """Tests for open_stream and stream_response."""

    @pytest.mark.asyncio
    async def test_body_left_unread(self):
        def handler(request):
            return httpx.Response(200, stream=httpx.ByteStream(b"chunk"))

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        with patch("upstream.get_client", return_value=client):
            response = await upstream.open_stream("GET", "https://sub.kuwo.cn/a.mp3", {"User-Agent": "x"})

        assert response.status_code == 200
        assert not response.is_closed
        assert response.request.headers["User-Agent"] == "x"
        await response.aclose()
        await client.aclose()

    @pytest.mark.asyncio
    async def test_stream_response_closes_upstream(self):
        def handler(request):
            return httpx.Response(206, stream=httpx.ByteStream(b"abcdef"))

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        with patch("upstream.get_client", return_value=client):
            response = await upstream.open_stream("GET", "https://sub.kuwo.cn/a.mp3", {})

        relayed = upstream.stream_response(response, {"Access-Control-Allow-Origin": "*"})
        assert relayed.status_code == 206
        body = b"".join([chunk async for chunk in relayed.body_iterator])
        assert body == b"abcdef"
        assert response.is_closed
        await client.aclose()

    @pytest.mark.asyncio
    async def test_unread_upstream_closed_by_background_task(self):
        """An upstream whose body is never pulled is still closed."""

        def handler(request):
            return httpx.Response(200, stream=httpx.ByteStream(b"never read"))

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        with patch("upstream.get_client", return_value=client):
            response = await upstream.open_stream("GET", "https://sub.kuwo.cn/a.mp3", {})

        relayed = upstream.stream_response(response, {})
        assert relayed.background is not None
        await relayed.background()
        assert response.is_closed
        await client.aclose()
