"""Relay endpoints for the music API and allow-listed audio hosts."""

from routers.relay._api import API_BASE_URL, relay_api
from routers.relay._audio import relay_audio
from routers.relay._dispatch import router
from routers.relay._errors import (
    HostNotAllowed,
    InvalidTarget,
    MethodNotAllowed,
    MissingParameter,
    RelayError,
)

__all__ = [
    "router",
    "relay_api",
    "relay_audio",
    "API_BASE_URL",
    "RelayError",
    "InvalidTarget",
    "HostNotAllowed",
    "MissingParameter",
    "MethodNotAllowed",
]
