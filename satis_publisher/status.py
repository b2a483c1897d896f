"""
HTTP status vocabulary for satis publishing.

Maps remote error responses onto the small set of status codes callers
care about. The numeric code reported by the transport is authoritative;
the status-line text is only inspected when the code is missing.
"""

import re
from enum import IntEnum

from satis_publisher.exceptions import RemoteStatusError


class Status(IntEnum):
    """Status codes exposed by RepositoryPublisher.status()."""

    OK = 200
    CREATED = 201
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    NOT_ALLOWED = 405


# Status lines recognized when no numeric code is available. Some servers
# answer with localized (French) reason phrases.
_STATUS_LINE_PATTERNS: dict[Status, re.Pattern[str]] = {
    Status.NOT_FOUND: re.compile(r"404 (Not Found|Introuvable)"),
    Status.FORBIDDEN: re.compile(r"403 Forbidden"),
    Status.UNAUTHORIZED: re.compile(r"401 (Unauthorized|Non-Autoris)"),
    Status.NOT_ALLOWED: re.compile(r"405 Method Not Allowed"),
}

GET_ERROR_STATUSES = (Status.NOT_FOUND, Status.FORBIDDEN, Status.UNAUTHORIZED)
PUT_ERROR_STATUSES = (Status.FORBIDDEN, Status.NOT_ALLOWED, Status.UNAUTHORIZED)


def resolve_error_status(
    error: RemoteStatusError,
    recognized: tuple[Status, ...],
) -> Status | None:
    """
    Resolve a remote error into one of the recognized statuses.

    Args:
        error: Error raised by the transport
        recognized: Statuses meaningful for the request that failed

    Returns:
        The matching Status, or None when the error is not recognized
    """
    if error.status_code is not None:
        for status in recognized:
            if error.status_code == status:
                return status
        return None

    return match_status_line(error.status_line, recognized)


def match_status_line(
    status_line: str,
    recognized: tuple[Status, ...],
) -> Status | None:
    """Match a raw status line such as "404 Introuvable" against known patterns."""
    for status in recognized:
        if _STATUS_LINE_PATTERNS[status].search(status_line):
            return status
    return None
