"""
HTTP transport returning queued responses, for tests.
"""

import json
from typing import Any
from urllib.parse import parse_qs

import httpx


def ok(**fields: Any) -> dict[str, Any]:
    """Build a successful Keybase response body."""
    return {"status": {"code": 0, "name": "OK"}, **fields}


def error(name: str, code: int = 100, desc: str | None = None) -> dict[str, Any]:
    """Build a failed Keybase response body."""
    return {"status": {"code": code, "name": name, "desc": desc or name}}


def form_data(request: httpx.Request) -> dict[str, str]:
    """Decode a form-encoded request body."""
    parsed = parse_qs(request.content.decode())
    return {key: values[0] for key, values in parsed.items()}


class MockTransport(httpx.BaseTransport):
    """Mock transport for testing."""

    def __init__(self, responses: list[dict[str, Any]] | None = None) -> None:
        self._responses = responses or []
        self._call_index = 0
        self.requests: list[httpx.Request] = []

    def add_response(
        self,
        status_code: int = httpx.codes.OK,
        json_data: dict[str, Any] | None = None,
        content: bytes | None = None,
        error: Exception | None = None,
    ) -> None:
        """Add a response to the queue."""
        self._responses.append(
            {
                "status_code": status_code,
                "json_data": json_data,
                "content": content,
                "error": error,
            }
        )

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        """Return next queued response."""
        self.requests.append(request)
        if self._call_index >= len(self._responses):
            return httpx.Response(
                httpx.codes.INTERNAL_SERVER_ERROR,
                content=b'{"status": {"code": 500, "name": "NO_MOCK_RESPONSE"}}',
            )

        resp_data = self._responses[self._call_index]
        self._call_index += 1

        if resp_data.get("error") is not None:
            raise resp_data["error"]

        content = resp_data.get("content")
        if content is None and resp_data.get("json_data") is not None:
            content = json.dumps(resp_data["json_data"]).encode()

        return httpx.Response(
            status_code=resp_data["status_code"],
            content=content or b"",
        )
