"""
Mock repository server for testing.

Provides a MockRepositoryServer that answers publisher requests with queued
responses through an httpx.MockTransport, without any network access.
"""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import httpx


@dataclass
class MockResponse:
    """Configuration for a queued mock response."""

    status_code: int = 200
    body: str | bytes = ""
    headers: dict[str, str] = field(default_factory=dict)
    reason_phrase: str | None = None
    error: Exception | None = None


@dataclass
class MockCall:
    """Record of a request received by the mock server."""

    method: str
    path: str
    headers: dict[str, str]
    content: bytes
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class MockRepositoryServer:
    """
    Mock satis repository server for testing.

    Responses are served in the order they were queued. A request arriving
    when the queue is empty fails the test with an AssertionError.

    Example:
        ```python
        from satis_publisher import RepositoryPublisher
        from satis_publisher.testing import MockRepositoryServer

        server = MockRepositoryServer()
        server.queue(201)

        publisher = RepositoryPublisher(
            "http://localhost/",
            credentials=("user", "pass"),
            transport=server.transport,
        )
        publisher.put_file("packages.json", "{}")

        assert publisher.status() == 201
        assert server.call_count("PUT") == 1
        ```
    """

    def __init__(self) -> None:
        self._responses: deque[MockResponse] = deque()
        self._calls: list[MockCall] = []
        self.transport = httpx.MockTransport(self._handle)

    def queue(
        self,
        status_code: int = 200,
        body: str | bytes = "",
        headers: dict[str, str] | None = None,
        reason_phrase: str | None = None,
    ) -> "MockRepositoryServer":
        """
        Queue a response.

        Args:
            status_code: HTTP status code to answer with
            body: Response body
            headers: Response headers
            reason_phrase: Custom reason phrase (e.g., "Introuvable")

        Returns:
            This server, for chaining
        """
        self._responses.append(
            MockResponse(
                status_code=status_code,
                body=body,
                headers=headers or {},
                reason_phrase=reason_phrase,
            )
        )
        return self

    def queue_error(self, error: Exception) -> "MockRepositoryServer":
        """Queue an exception raised instead of answering (e.g., httpx.ConnectError)."""
        self._responses.append(MockResponse(error=error))
        return self

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self._calls.append(
            MockCall(
                method=request.method,
                path=request.url.path,
                headers=dict(request.headers),
                content=request.read(),
            )
        )

        if not self._responses:
            raise AssertionError(
                f"Unexpected request {request.method} {request.url.path}: no response queued"
            )

        resp = self._responses.popleft()
        if resp.error is not None:
            raise resp.error

        extensions: dict[str, Any] = {}
        if resp.reason_phrase is not None:
            extensions["reason_phrase"] = resp.reason_phrase.encode("ascii")

        return httpx.Response(
            resp.status_code,
            headers=resp.headers,
            content=resp.body,
            extensions=extensions,
        )

    def was_called(self, method: str | None = None) -> bool:
        """Check if a request (optionally with the given HTTP method) was received."""
        return self.call_count(method) > 0

    def call_count(self, method: str | None = None) -> int:
        """
        Get the number of requests received.

        Args:
            method: Optional HTTP method to filter by

        Returns:
            Number of matching requests
        """
        return len(self.get_calls(method))

    def get_calls(self, method: str | None = None) -> list[MockCall]:
        """
        Get recorded requests, optionally filtered by HTTP method.

        Args:
            method: Optional HTTP method to filter by

        Returns:
            List of MockCall objects
        """
        if method is None:
            return list(self._calls)
        return [call for call in self._calls if call.method == method]

    @property
    def pending(self) -> int:
        """Number of queued responses not served yet."""
        return len(self._responses)

    def reset(self) -> None:
        """Reset all recorded calls and queued responses."""
        self._calls.clear()
        self._responses.clear()


__all__ = [
    "MockRepositoryServer",
    "MockCall",
    "MockResponse",
]
