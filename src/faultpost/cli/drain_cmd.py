"""Drain subcommand implementation."""

from __future__ import annotations

import sys
from pathlib import Path

from ..core.context import get_configuration
from ..delay import SpoolWorker


def run_drain(
    spool_dir: Path,
    *,
    endpoint: str | None,
    timeout: float | None,
    write_to: Path | None,
) -> int:
    if not spool_dir.is_dir():
        print(f"Error: spool directory not found: {spool_dir}", file=sys.stderr)
        return 1

    configuration = get_configuration().clone()
    configuration.enabled = True
    configuration.use_async = False
    if endpoint is not None:
        configuration.endpoint = endpoint
    if timeout is not None:
        configuration.request_timeout = timeout
    if write_to is not None:
        configuration.write_to_file = True
        configuration.filepath = str(write_to)

    worker = SpoolWorker(spool_dir, configuration=configuration)
    processed = worker.drain()
    print(f"Processed {processed} job(s) from {spool_dir}")
    return 0
