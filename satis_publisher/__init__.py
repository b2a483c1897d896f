"""Satis publisher - publish static satis repositories over HTTP PUT."""

from satis_publisher.exceptions import (
    BundleRejectedError,
    ConfigurationError,
    DirectoryNotFoundError,
    NetworkError,
    RemoteStatusError,
    SatisPublisherError,
    UploadRejectedError,
)
from satis_publisher.logging import configure_logging, get_logger
from satis_publisher.policy import AccessPolicy
from satis_publisher.publisher import RepositoryPublisher
from satis_publisher.status import Status
from satis_publisher.transport import HTTPTransport
from satis_publisher.types import LocalFile, TransportResponse

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Main Client
    "RepositoryPublisher",
    # Policy
    "AccessPolicy",
    "LocalFile",
    # Status
    "Status",
    # Exceptions
    "SatisPublisherError",
    "ConfigurationError",
    "UploadRejectedError",
    "BundleRejectedError",
    "DirectoryNotFoundError",
    "RemoteStatusError",
    "NetworkError",
    # Transport
    "HTTPTransport",
    "TransportResponse",
    # Logging
    "configure_logging",
    "get_logger",
]
