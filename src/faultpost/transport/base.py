"""Transport abstractions."""

from __future__ import annotations

from typing import Protocol


class Transport(Protocol):
    """Protocol for delivering a serialized payload to the collector.

    ``send`` performs a single attempt and raises on network failure.
    """

    def send(self, body: str, access_token: str | None) -> None: ...
