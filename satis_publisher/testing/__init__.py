"""Satis publisher testing utilities.

Provides a mock repository server and fixtures for testing code that
publishes satis repositories.
"""

from satis_publisher.testing.mock import MockCall, MockRepositoryServer, MockResponse

__all__ = [
    "MockRepositoryServer",
    "MockCall",
    "MockResponse",
]
