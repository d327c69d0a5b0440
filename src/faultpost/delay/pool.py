"""Bounded thread pool async handler."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

from ..core.config import Configuration
from ..core.context import propagate_context
from .base import process_job


class ThreadPoolHandler:
    """Queues payloads on a fixed pool of worker threads.

    After :meth:`shutdown` every call raises ``RuntimeError``, which lets
    the notifier move on to its failover handlers.
    """

    def __init__(self, max_workers: int = 4, configuration: Configuration | None = None) -> None:
        self.configuration = configuration
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="faultpost")

    def __call__(self, payload_value: dict[str, Any]) -> Future[None]:
        return self._executor.submit(propagate_context(process_job), payload_value, self.configuration)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
