"""
Pytest configuration and fixtures for client tests.

Provides:
- A recording httpx transport with queued responses
- An APIClient wired to that transport
- Sample payloads shaped like the backend's responses
"""

import json
from typing import Any, Optional

import httpx
import pytest

from security_console.api.client import APIClient

BASE_URL = "http://gateway.test/api/v1"


# =============================================================================
# Recording Transport
# =============================================================================


class RecordingTransport(httpx.MockTransport):
    """MockTransport that records requests and replays queued responses."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.responses: list[httpx.Response] = []
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            return httpx.Response(200, json={"code": 0, "message": "success", "data": {}})
        return self.responses.pop(0)

    def reply(self, data: Any, status_code: int = 200, code: int = 0, message: str = "success"):
        """Queue an enveloped JSON response."""
        self.responses.append(
            httpx.Response(
                status_code, json={"code": code, "message": message, "data": data}
            )
        )

    def reply_raw(
        self,
        status_code: int = 200,
        content: bytes = b"",
        headers: Optional[dict[str, str]] = None,
    ):
        """Queue a response with a raw body."""
        self.responses.append(
            httpx.Response(status_code, content=content, headers=headers or {})
        )

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def api_client(transport: RecordingTransport) -> APIClient:
    return APIClient(BASE_URL, token="admin-token", timeout=30, transport=transport)


# =============================================================================
# Sample Payloads
# =============================================================================


@pytest.fixture
def session_payload() -> dict:
    return {
        "session_id": "sess-123",
        "user_id": 7,
        "user_email": "ops@example.com",
        "api_key_id": 3,
        "platform": "anthropic",
        "model": "claude-sonnet",
        "message_preview": "please summarize the quarterly report",
        "last_at": "2026-10-18T09:30:00Z",
        "request_count": 4,
    }


@pytest.fixture
def log_payload() -> dict:
    return {
        "id": 42,
        "session_id": "sess-123",
        "request_id": "req-1",
        "user_id": 7,
        "platform": "anthropic",
        "model": "claude-sonnet",
        "request_path": "/v1/messages",
        "stream": True,
        "status_code": 200,
        "messages": [
            {"role": "assistant", "content": "Here it is.", "source": "response", "index": 2},
            {"role": "system", "content": "Be brief.", "source": "request", "index": 0},
            {"role": "user", "content": "Summarize this.", "source": "request", "index": 1},
        ],
        "created_at": "2026-10-18T09:29:00Z",
    }
