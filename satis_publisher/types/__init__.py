"""Satis publisher type definitions.

This module exports the data model types used by the publisher.
"""

from satis_publisher.types.files import LocalFile
from satis_publisher.types.responses import TransportResponse

__all__ = [
    # Local repository files
    "LocalFile",
    # Transport results
    "TransportResponse",
]
