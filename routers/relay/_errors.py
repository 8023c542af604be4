"""Validation errors raised by the relays.

Each error carries a fixed status and plain-text body; nothing about the
request or the server leaks into the response.
"""

from typing import Optional

from fastapi.responses import PlainTextResponse


class RelayError(Exception):
    """Request rejected before anything was sent upstream."""

    status_code = 400
    message = "Bad request"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_response(self) -> PlainTextResponse:
        return PlainTextResponse(self.message, status_code=self.status_code)


class InvalidTarget(RelayError):
    """Target URL is malformed or not http(s)."""

    status_code = 400
    message = "Invalid target"


class HostNotAllowed(RelayError):
    """Target host is outside the allow-list."""

    status_code = 403
    message = "Target host not allowed"


class MissingParameter(RelayError):
    """A required query parameter is absent."""

    status_code = 400

    def __init__(self, name: str):
        super().__init__(f"Missing {name}")
        self.parameter = name


class MethodNotAllowed(RelayError):
    status_code = 405
    message = "Method not allowed"
