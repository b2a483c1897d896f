"""
Satis repository publisher.

Provides the primary interface for publishing a statically generated satis
repository (packages.json, include/ and dist/ files) to a web server that
accepts HTTP PUT.
"""

import os
from pathlib import Path
from typing import Any
from urllib.parse import quote

import httpx

from satis_publisher.exceptions import (
    BundleRejectedError,
    ConfigurationError,
    DirectoryNotFoundError,
    RemoteStatusError,
    UploadRejectedError,
)
from satis_publisher.logging import get_logger, mask_sensitive_data
from satis_publisher.policy import AccessPolicy
from satis_publisher.status import (
    GET_ERROR_STATUSES,
    PUT_ERROR_STATUSES,
    Status,
    resolve_error_status,
)
from satis_publisher.transport import HTTPTransport

logger = get_logger()


class RepositoryPublisher:
    """
    Client publishing a satis repository to a remote web server.

    Every PUT is checked against the AccessPolicy first. Error statuses sent
    back by the server are recorded in ``status()`` instead of being raised,
    so that publishing a whole directory goes on past a refused file.

    Example:
        ```python
        from satis_publisher import AccessPolicy, RepositoryPublisher

        publisher = RepositoryPublisher(
            "https://satis.example.org/repo/",
            credentials=("deploy", "secret"),
        )

        # Upload a whole build directory, file by file
        publisher.put_dir("build")

        # Or let the server unpack a zip bundle
        publisher.put_bundle_zip("build.zip")
        print(publisher.status())
        ```
    """

    DEFAULT_TIMEOUT = 30.0
    EXPLODE_ARCHIVE_HEADER = "X-Explode-Archive"

    def __init__(
        self,
        target_url: str,
        credentials: tuple[str, str] | None = None,
        policy: AccessPolicy | None = None,
        timeout: float | None = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the publisher.

        Args:
            target_url: Satis repository url, optionally with user:password@
            credentials: (user, password) pair, overrides credentials in the url
            policy: Access policy of the server (default: AccessPolicy())
            timeout: Request timeout in seconds (default: 30.0)
            transport: Custom httpx transport (optional)

        Raises:
            ConfigurationError: If the url is invalid, or if credentials are
                given to a public server or missing for a private one
        """
        self._credentials: tuple[str, str] | None = None
        self._last_status: int | None = None
        self._last_body = ""
        self._transport: HTTPTransport | None = None
        self.base_path = "/"

        self.base_url = self._set_url_helper(target_url)
        if credentials is not None:
            self.set_credentials(credentials)

        self.policy = policy if policy is not None else AccessPolicy()
        self.check_server()

        self._transport = HTTPTransport(
            base_url=self.base_url,
            credentials=self._credentials,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_env(
        cls,
        timeout: float | None = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> "RepositoryPublisher":
        """
        Create a publisher from environment variables.

        Environment variables:
            SATIS_REPOSITORY_URL: Satis repository url (required)
            SATIS_USERNAME: User for basic authentication (optional)
            SATIS_PASSWORD: Password for basic authentication (optional)
            SATIS_POLICY_FILE: Path of a JSON policy document (optional)

        Args:
            timeout: Request timeout in seconds (default: 30.0)
            transport: Custom httpx transport (optional)

        Returns:
            Configured RepositoryPublisher instance

        Raises:
            ConfigurationError: If required environment variables are missing
        """
        target_url = os.environ.get("SATIS_REPOSITORY_URL")
        username = os.environ.get("SATIS_USERNAME")
        password = os.environ.get("SATIS_PASSWORD")
        policy_file = os.environ.get("SATIS_POLICY_FILE")

        if not target_url:
            raise ConfigurationError("SATIS_REPOSITORY_URL environment variable not set")

        if bool(username) != bool(password):
            raise ConfigurationError(
                "SATIS_USERNAME and SATIS_PASSWORD must be set together"
            )

        credentials = (username, password) if username and password else None

        policy = AccessPolicy()
        if policy_file:
            policy.parse(policy_file)

        return cls(
            target_url,
            credentials=credentials,
            policy=policy,
            timeout=timeout,
            transport=transport,
        )

    def _set_url_helper(self, target_url: str) -> str:
        """Set base path and url credentials, and return the base url."""
        try:
            url = httpx.URL(target_url)
        except httpx.InvalidURL as e:
            raise ConfigurationError(
                f"Invalid repository url {mask_sensitive_data(target_url)}: {e}"
            ) from e

        if url.scheme not in ("http", "https") or not url.host:
            raise ConfigurationError(
                f"Invalid repository url {mask_sensitive_data(target_url)}"
            )

        if url.username and url.password:
            self._credentials = (url.username, url.password)

        if url.path:
            self.base_path = url.path if url.path.endswith("/") else url.path + "/"

        return f"{url.scheme}://{url.netloc.decode('ascii')}"

    @property
    def credentials(self) -> tuple[str, str] | None:
        return self._credentials

    def set_credentials(self, credentials: tuple[str, str] | None) -> "RepositoryPublisher":
        """
        Set the credentials used to authenticate.

        Does not re-run check_server(); call it when the policy must be
        verified again.
        """
        self._credentials = tuple(credentials) if credentials is not None else None
        if self._transport is not None:
            self._transport.credentials = self._credentials
        return self

    def status(self) -> int | None:
        """Get the last http status received (None before any request)."""
        return self._last_status

    def body(self) -> str:
        """Get the body of the last successful response ("" if none)."""
        return self._last_body

    def check_server(self) -> bool:
        """
        Check that client and server can talk together.

        Returns:
            True when credentials are present exactly when the server is private

        Raises:
            ConfigurationError: On a private server without credentials or a
                public server with credentials
        """
        if (self._credentials is None) == self.policy.requires_authentication:
            if self._credentials is None:
                reason = "server needs authentication but no credentials given"
            else:
                reason = "credentials given but server does not need authentication"
            raise ConfigurationError(f"Cannot initialize publisher ({reason})")

        return True

    def get_file(self, path: str = "satis.json") -> "RepositoryPublisher":
        """
        GET a file from the repository.

        Args:
            path: File to GET, relative to the base path

        Returns:
            This publisher
        """
        try:
            response = self._transport.request("GET", self._request_path(path))
        except RemoteStatusError as e:
            self._record_error(e, GET_ERROR_STATUSES)
        else:
            self._last_status = response.status_code
            self._last_body = response.body

        return self

    def put_file(
        self,
        path: str = "satis.json",
        content: str | bytes = "",
        headers: dict[str, str] | None = None,
    ) -> "RepositoryPublisher":
        """
        PUT a file to the repository.

        Args:
            path: File to PUT, relative to the base path
            content: Content of the file
            headers: Additional headers

        Returns:
            This publisher

        Raises:
            UploadRejectedError: If the policy does not allow the file; no
                request is sent
        """
        if not self.policy.is_allowed(path, self.base_path):
            raise UploadRejectedError(path)

        target = self._request_path(path)
        try:
            response = self._transport.request(
                "PUT", target, content=content, headers=headers or {}
            )
        except RemoteStatusError as e:
            self._record_error(e, PUT_ERROR_STATUSES)
        else:
            self._last_status = response.status_code
            self._last_body = response.body
            logger.info(f"Uploaded {target} ({response.status_code})")

        return self

    def put_bundle_zip(self, archive: str | Path = "build.zip") -> "RepositoryPublisher":
        """
        PUT a whole repository bundled in a zip archive.

        The server is asked to unpack the archive in place.

        Args:
            archive: Local path of the zip archive

        Returns:
            This publisher

        Raises:
            BundleRejectedError: If bundles are refused by the server, or the
                archive is missing, unreadable or empty
        """
        archive_path = Path(archive)

        if not self.policy.accepts_bundle_upload:
            raise BundleRejectedError(str(archive), "server does not accept bundles")
        if not archive_path.is_file():
            raise BundleRejectedError(str(archive), "archive not found")

        try:
            contents = archive_path.read_bytes()
        except OSError as e:
            raise BundleRejectedError(str(archive), f"archive unreadable: {e}") from e

        if not contents:
            raise BundleRejectedError(str(archive), "archive is empty")

        return self.put_file(
            archive_path.name,
            contents,
            {self.EXPLODE_ARCHIVE_HEADER: "true"},
        )

    def put_dir(self, directory: str | Path) -> "RepositoryPublisher":
        """
        PUT a repository directory file by file.

        Only the files accepted by the policy are sent, one request at a time.

        Args:
            directory: Local repository directory (e.g., satis "build" output)

        Returns:
            This publisher

        Raises:
            DirectoryNotFoundError: If directory is not a directory
        """
        if not Path(directory).is_dir():
            raise DirectoryNotFoundError(str(directory))

        for local_file in self.policy.enumerate_local_files(directory):
            self.put_file(local_file.relative_path, local_file.content)

        return self

    def _request_path(self, path: str) -> str:
        """Percent-encode base path and file so the server sees the checked path."""
        # "#", "?" and "%XX" would otherwise be read as url syntax
        return quote(self.base_path + path.replace("\\", "/"), safe="/")

    def _record_error(
        self, error: RemoteStatusError, recognized: tuple[Status, ...]
    ) -> None:
        status = resolve_error_status(error, recognized)
        if status is None:
            logger.warning(f"Unrecognized server error: {error.status_line}")
            return
        self._last_status = int(status)

    @property
    def transport(self) -> HTTPTransport | None:
        """Get the underlying HTTP transport (for advanced use cases)."""
        return self._transport

    def close(self) -> None:
        """Close the publisher and release resources."""
        self._transport.close()

    def __enter__(self) -> "RepositoryPublisher":
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit - closes the publisher."""
        self.close()
