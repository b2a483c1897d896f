"""Local repository file models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class LocalFile:
    """A file found under a local repository directory."""

    relative_path: str  # always "/"-separated
    content: bytes
