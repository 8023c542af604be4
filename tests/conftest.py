"""Shared test fixtures for Music Relay tests."""

import os
import sys
from typing import Callable, List, Optional
from unittest.mock import patch

import httpx
import pytest
from fastapi.testclient import TestClient

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))


# =============================================================================
# Mock Upstream Fixtures
# =============================================================================


class MockUpstream:
    """Records outbound requests and answers them with a canned response."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.headers: List[tuple] = [("Content-Type", "audio/mpeg")]
        self.content = b"ID3fake-audio-bytes"
        self.handler: Optional[Callable[[httpx.Request], httpx.Response]] = None

    def respond(self, status_code: int = 200, headers=None, content: bytes = b""):
        self.status_code = status_code
        self.headers = list(headers or [])
        self.content = content

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.handler is not None:
            return self.handler(request)
        return httpx.Response(self.status_code, headers=self.headers, stream=httpx.ByteStream(self.content))

    @property
    def last_request(self) -> httpx.Request:
        assert self.requests, "upstream was never called"
        return self.requests[-1]


@pytest.fixture
def mock_upstream():
    """Route all upstream traffic to an in-memory transport."""
    recorder = MockUpstream()
    client = httpx.AsyncClient(transport=httpx.MockTransport(recorder), follow_redirects=True)
    with patch("upstream.get_client", return_value=client):
        yield recorder


@pytest.fixture
def test_client():
    """Test client for the full application."""
    from server import app

    with TestClient(app) as client:
        yield client
