"""Entry point: classify each request and hand it to the right relay."""

import logging
from typing import Optional

from fastapi import APIRouter, Request
from starlette.datastructures import QueryParams
from starlette.responses import Response

from cors import preflight_response
from routers.relay._api import relay_api
from routers.relay._audio import relay_audio
from routers.relay._errors import MethodNotAllowed, RelayError

router = APIRouter(tags=["relay"])

logger = logging.getLogger(__name__)

# Every method is routed here so unsupported ones get our own 405 body
DISPATCH_METHODS = ["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"]
RELAY_METHODS = frozenset({"GET", "HEAD"})


def _first(params: QueryParams, key: str) -> Optional[str]:
    values = params.getlist(key)
    return values[0] if values else None


@router.api_route("/", methods=DISPATCH_METHODS, include_in_schema=False)
@router.api_route("/proxy", methods=DISPATCH_METHODS, include_in_schema=False)
async def dispatch(request: Request) -> Response:
    """Route to the audio relay when a target is given, else to the API relay."""
    if request.method == "OPTIONS":
        return preflight_response()

    try:
        if request.method not in RELAY_METHODS:
            logger.warning(f"[Dispatch] Method not allowed: {request.method}")
            raise MethodNotAllowed()

        params = request.query_params
        target = _first(params, "target")
        if target:
            return await relay_audio(target, _first(params, "source"), request)
        return await relay_api(params, request)
    except RelayError as e:
        return e.to_response()
