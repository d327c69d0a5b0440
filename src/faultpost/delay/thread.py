"""Thread-per-job async handler."""

from __future__ import annotations

import threading
from typing import Any

from ..core.config import Configuration
from ..core.context import propagate_context
from .base import process_job


class ThreadHandler:
    """Starts one thread per payload. The default async handler.

    The job runs with a copy of the caller's context variables.
    """

    def __init__(self, configuration: Configuration | None = None, *, daemon: bool = False) -> None:
        self.configuration = configuration
        self.daemon = daemon

    def __call__(self, payload_value: dict[str, Any]) -> threading.Thread:
        thread = threading.Thread(
            target=propagate_context(process_job),
            args=(payload_value, self.configuration),
            name="faultpost-delivery",
            daemon=self.daemon,
        )
        thread.start()
        return thread
