"""URL validation for caller-supplied relay targets.

Only absolute http(s) URLs with a host are relayed. Anything else (file:,
data:, javascript:, ftp:, relative paths) is rejected before a request is
built.
"""

import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = frozenset({"http", "https"})


def normalize_target_url(raw_url: str) -> Optional[httpx.URL]:
    """Parse a target URL, returning None unless it is absolute http(s).

    Args:
        raw_url: URL exactly as received in the query string

    Returns:
        The parsed URL, or None if it does not parse, uses another scheme,
        or has no host.
    """
    if not raw_url:
        return None
    try:
        parsed = httpx.URL(raw_url.strip())
    except (httpx.InvalidURL, ValueError, TypeError) as e:
        logger.debug(f"Target URL failed to parse: {e}")
        return None

    if parsed.scheme not in ALLOWED_SCHEMES:
        return None
    if not parsed.host:
        return None
    return parsed


def origin_of(url: str) -> Optional[str]:
    """Scheme and host (plus non-default port) of url, or None if unparsable."""
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, ValueError, TypeError):
        return None
    if not parsed.scheme or not parsed.host:
        return None

    host = parsed.host
    if ":" in host:
        # IPv6 literal
        host = f"[{host}]"
    if parsed.port is not None:
        return f"{parsed.scheme}://{host}:{parsed.port}"
    return f"{parsed.scheme}://{host}"
