"""Shared HTTP client for upstream calls and streamed pass-through responses."""

import logging
from typing import Any, AsyncIterator, Mapping, Optional

import httpx
from starlette.background import BackgroundTask
from starlette.responses import StreamingResponse

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "Mozilla/5.0"

# Shared HTTP client for connection pooling
_client: Optional[httpx.AsyncClient] = None


async def get_client() -> httpx.AsyncClient:
    """Get or create the shared HTTP client.

    No timeout is applied: the upstream decides how long a stream lasts.
    Identity encoding keeps Content-Length and Content-Range valid for the
    raw bytes passed through.
    """
    global _client
    if _client is None or _client.is_closed:
        _client = httpx.AsyncClient(
            timeout=httpx.Timeout(None),
            follow_redirects=True,
            headers={"Accept-Encoding": "identity"},
        )
    return _client


async def close_client() -> None:
    """Close the shared HTTP client, if one was created."""
    global _client
    if _client is not None and not _client.is_closed:
        await _client.aclose()
        logger.info("Closed upstream HTTP client")
    _client = None


async def open_stream(
    method: str,
    url: Any,
    headers: Mapping[str, str],
    params: Optional[Mapping[str, str]] = None,
) -> httpx.Response:
    """Send a request and return once the upstream response headers arrive.

    The body is left unread. Transport errors are not caught.
    """
    client = await get_client()
    request = client.build_request(method, url, headers=headers, params=params)
    return await client.send(request, stream=True)


async def _pass_through(upstream: httpx.Response) -> AsyncIterator[bytes]:
    try:
        async for chunk in upstream.aiter_raw():
            yield chunk
    finally:
        await upstream.aclose()


def stream_response(upstream: httpx.Response, headers: Mapping[str, str]) -> StreamingResponse:
    """Relay an open upstream response without buffering its body.

    The upstream is closed when the body is exhausted or, if the body is
    never pulled, once the response is done.
    """
    return StreamingResponse(
        _pass_through(upstream),
        status_code=upstream.status_code,
        headers=headers,
        background=BackgroundTask(upstream.aclose),
    )
