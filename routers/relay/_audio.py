"""Audio relay: stream media from allow-listed hosts with the headers they expect."""

import logging
from typing import Dict, Optional

from fastapi import Request
from starlette.responses import StreamingResponse

import upstream
from cors import build_cors_headers
from policy import DEFAULT_POLICY, PolicyTable
from routers.relay._errors import HostNotAllowed, InvalidTarget
from security import normalize_target_url, origin_of

logger = logging.getLogger(__name__)

# Audio is cacheable for an hour unless the upstream says otherwise
AUDIO_CACHE_CONTROL = "public, max-age=3600"


def build_audio_headers(
    request: Request,
    source: Optional[str],
    hostname: str,
    policy: PolicyTable = DEFAULT_POLICY,
) -> Dict[str, str]:
    """Build the headers sent to the media host.

    Contains User-Agent, plus Referer and Origin when a referer is known
    for the source or host, plus the caller's Range if any.
    """
    headers = {
        "User-Agent": request.headers.get("user-agent") or upstream.DEFAULT_USER_AGENT,
    }

    referer = policy.referer_for(source, hostname)
    if referer:
        headers["Referer"] = referer
        origin = origin_of(referer)
        if origin:
            headers["Origin"] = origin

    range_header = request.headers.get("range")
    if range_header:
        headers["Range"] = range_header

    return headers


async def relay_audio(
    target_url: str,
    source: Optional[str],
    request: Request,
    policy: PolicyTable = DEFAULT_POLICY,
) -> StreamingResponse:
    """Relay an audio request to an allow-listed media host.

    Raises:
        InvalidTarget: target is not an absolute http(s) URL
        HostNotAllowed: target host is not allowed for the source
    """
    target = normalize_target_url(target_url)
    if target is None:
        logger.warning("[AudioRelay] Rejected invalid target URL")
        raise InvalidTarget()

    hostname = target.host
    if not policy.is_allowed_host(hostname, source):
        logger.warning(f"[AudioRelay] Host not allowed: {hostname} (source={source})")
        raise HostNotAllowed()

    headers = build_audio_headers(request, source, hostname, policy)
    method = "HEAD" if request.method == "HEAD" else "GET"

    logger.info(f"[AudioRelay] {method} {hostname} (source={source}, range={headers.get('Range')})")
    response = await upstream.open_stream(method, target, headers)
    logger.info(f"[AudioRelay] Upstream {hostname} responded {response.status_code}")

    response_headers = build_cors_headers(response.headers, cache_control=AUDIO_CACHE_CONTROL)
    return upstream.stream_response(response, response_headers)
