"""Transport response models."""

from dataclasses import dataclass, field


@dataclass
class TransportResponse:
    """A completed HTTP exchange with a success (< 400) status."""

    status_code: int
    body: str
    headers: dict[str, str] = field(default_factory=dict)
