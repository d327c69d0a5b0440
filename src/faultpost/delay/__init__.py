"""Async handlers."""

from .base import AsyncHandler, process_job
from .pool import ThreadPoolHandler
from .spool import SpoolHandler, SpoolWorker
from .thread import ThreadHandler

__all__ = [
    "AsyncHandler",
    "SpoolHandler",
    "SpoolWorker",
    "ThreadHandler",
    "ThreadPoolHandler",
    "process_job",
]
