"""Satis publisher exception classes."""



class SatisPublisherError(Exception):
    """Base exception for all satis publisher errors."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class ConfigurationError(SatisPublisherError):
    """Raised when publisher or policy configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class UploadRejectedError(SatisPublisherError):
    """Raised when a path is refused by the access policy before any PUT."""

    def __init__(self, path: str) -> None:
        super().__init__(
            "UPLOAD_REJECTED",
            f"PUT of {path} refused (not allowed files or sub-directories)",
        )
        self.path = path


class BundleRejectedError(SatisPublisherError):
    """Raised when a zip bundle cannot be uploaded."""

    def __init__(self, archive: str, reason: str) -> None:
        super().__init__("BUNDLE_REJECTED", f"PUT of {archive} refused ({reason})")
        self.archive = archive
        self.reason = reason


class DirectoryNotFoundError(SatisPublisherError):
    """Raised when a local repository directory does not exist."""

    def __init__(self, directory: str) -> None:
        super().__init__("DIRECTORY_NOT_FOUND", f"{directory} is not a directory")
        self.directory = directory


class RemoteStatusError(SatisPublisherError):
    """Raised by the transport when the server answers with an error status."""

    def __init__(self, status_code: int | None, status_line: str) -> None:
        super().__init__("REMOTE_STATUS", status_line)
        self.status_code = status_code
        self.status_line = status_line


class NetworkError(SatisPublisherError):
    """Raised when no HTTP response was received (DNS, connect, timeout)."""

    def __init__(self, message: str) -> None:
        super().__init__("NETWORK_ERROR", message)
