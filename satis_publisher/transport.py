"""
HTTP Transport for satis publishing.

Handles HTTP communication with the repository server and turns error
responses and network failures into typed exceptions.
"""

import time
from typing import Any

import httpx

from satis_publisher.exceptions import NetworkError, RemoteStatusError
from satis_publisher.logging import log_http_request, log_http_response
from satis_publisher.types.responses import TransportResponse


class HTTPTransport:
    """
    HTTP transport layer bound to a repository server.

    Handles:
    - HTTP basic authentication on every request
    - Error responses raised as RemoteStatusError with the numeric status
    - Connection and timeout failures raised as NetworkError

    Requests are issued one at a time and never retried.
    """

    def __init__(
        self,
        base_url: str,
        credentials: tuple[str, str] | None = None,
        timeout: float | None = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            base_url: Scheme, host and port of the server (e.g., "https://satis.example.org")
            credentials: Optional (user, password) pair for basic authentication
            timeout: Request timeout in seconds (None disables timeouts)
            transport: Custom httpx transport (e.g., httpx.MockTransport in tests)
        """
        self.base_url = base_url.rstrip("/")
        self.credentials = credentials
        self.timeout = timeout

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        content: str | bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> TransportResponse:
        """
        Make a request against the repository server.

        Args:
            method: HTTP method (GET, PUT)
            path: Absolute request path (e.g., "/satis.json")
            content: Raw request body
            headers: Additional request headers

        Returns:
            TransportResponse for any status below 400

        Raises:
            RemoteStatusError: If the server answers with an error status
            NetworkError: If no response was received
        """
        url = f"{self.base_url}{path}"
        log_http_request(
            method,
            url,
            headers=headers,
            content_length=len(content) if content is not None else None,
        )

        auth = httpx.BasicAuth(*self.credentials) if self.credentials else None
        started = time.monotonic()
        try:
            response = self._client.request(
                method, path, content=content, headers=headers, auth=auth
            )
        except httpx.RequestError as e:
            raise NetworkError(f"{method} {path} failed: {e}") from e

        log_http_response(
            response.status_code, url, elapsed_ms=(time.monotonic() - started) * 1000
        )

        if response.status_code >= 400:
            raise self._parse_error_response(response)

        return TransportResponse(
            status_code=response.status_code,
            body=response.text,
            headers=dict(response.headers),
        )

    def _parse_error_response(self, response: httpx.Response) -> RemoteStatusError:
        """
        Parse an error response into a typed exception.

        Args:
            response: HTTP response with error status

        Returns:
            RemoteStatusError carrying the status code and status line
        """
        reason = response.reason_phrase or ""
        status_line = f"{response.status_code} {reason}".strip()
        return RemoteStatusError(response.status_code, status_line)
