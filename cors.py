"""CORS and caching headers for relayed responses.

Upstream headers are copied only when their name is in SAFE_RESPONSE_HEADERS;
cookies, security policies and everything else the upstream sends stay behind.
"""

from typing import Mapping, Optional

from starlette.datastructures import MutableHeaders
from starlette.responses import Response

SAFE_RESPONSE_HEADERS = frozenset({
    "content-type",
    "cache-control",
    "accept-ranges",
    "content-length",
    "content-range",
    "etag",
    "last-modified",
    "expires",
})

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,HEAD,OPTIONS",
    "Access-Control-Allow-Headers": "*",
    "Access-Control-Max-Age": "86400",
}


def build_cors_headers(
    upstream_headers: Optional[Mapping[str, str]] = None,
    *,
    cache_control: str = "no-store",
    content_type: Optional[str] = None,
) -> MutableHeaders:
    """Build downstream headers from an upstream response.

    Args:
        upstream_headers: Headers received from the upstream, if any
        cache_control: Cache-Control to use when the upstream sent none
        content_type: Content-Type to use when the upstream sent none

    Returns:
        Headers containing only safe upstream values, the defaults, and
        Access-Control-Allow-Origin, which is always set last.
    """
    headers = MutableHeaders()
    if upstream_headers:
        for key, value in upstream_headers.items():
            if key.lower() in SAFE_RESPONSE_HEADERS:
                headers[key] = value

    if "cache-control" not in headers:
        headers["Cache-Control"] = cache_control
    if content_type and "content-type" not in headers:
        headers["Content-Type"] = content_type

    headers["Access-Control-Allow-Origin"] = "*"
    return headers


def preflight_response() -> Response:
    """Fixed answer to a CORS pre-flight request."""
    return Response(status_code=204, headers=PREFLIGHT_HEADERS)
