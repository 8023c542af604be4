"""API relay: forward search/metadata queries to the music API."""

import logging
from typing import Dict

from fastapi import Request
from starlette.datastructures import QueryParams
from starlette.responses import StreamingResponse

import upstream
from cors import build_cors_headers
from routers.relay._errors import MissingParameter

logger = logging.getLogger(__name__)

API_BASE_URL = "https://music-api.gdstudio.xyz/api.php"

# Routing-only parameters, never forwarded upstream
EXCLUDED_PARAMS = frozenset({"target", "callback"})

REQUIRED_PARAM = "types"

JSON_CONTENT_TYPE = "application/json; charset=utf-8"


def build_api_params(query_params: QueryParams) -> Dict[str, str]:
    """Copy inbound query parameters except the routing-only ones.

    A repeated key keeps the position of its first occurrence and the
    value of its last.
    """
    params: Dict[str, str] = {}
    for key, value in query_params.multi_items():
        if key in EXCLUDED_PARAMS:
            continue
        params[key] = value
    return params


async def relay_api(query_params: QueryParams, request: Request) -> StreamingResponse:
    """Relay a query to the music API and stream its JSON back.

    Raises:
        MissingParameter: no types parameter survived filtering
    """
    params = build_api_params(query_params)
    if REQUIRED_PARAM not in params:
        logger.warning(f"[ApiRelay] Missing {REQUIRED_PARAM} parameter")
        raise MissingParameter(REQUIRED_PARAM)

    headers = {
        "User-Agent": request.headers.get("user-agent") or upstream.DEFAULT_USER_AGENT,
        "Accept": "application/json",
    }

    logger.info(f"[ApiRelay] types={params[REQUIRED_PARAM]}")
    response = await upstream.open_stream("GET", API_BASE_URL, headers, params=params)
    logger.info(f"[ApiRelay] Upstream responded {response.status_code}")

    response_headers = build_cors_headers(response.headers, content_type=JSON_CONTENT_TYPE)
    return upstream.stream_response(response, response_headers)
