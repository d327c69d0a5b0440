"""Async handler abstractions."""

from __future__ import annotations

from typing import Any, Protocol

from ..core.config import Configuration
from ..core.context import get_configuration
from ..core.notifier import Notifier
from ..models import Payload


class AsyncHandler(Protocol):
    """Protocol for delivering a payload value off the caller's thread.

    Handlers receive plain JSON-ready data only. Delivery is at-least-once,
    so a handler may run the same job more than once.
    """

    def __call__(self, payload_value: dict[str, Any]) -> Any: ...


def process_job(payload_value: dict[str, Any] | str, configuration: Configuration | None = None) -> None:
    """Rebuild a payload from its plain value and deliver it without raising.

    Uses the process-wide configuration unless one is given.
    """
    configuration = configuration or get_configuration()
    payload = Payload(payload_value, configuration)
    Notifier(configuration).process_payload_safely(payload)
