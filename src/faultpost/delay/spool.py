"""Durable on-disk job queue."""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from typing import Any
from uuid import uuid4

from ..core.config import Configuration
from ..exceptions import FaultpostLoadError
from ..serializers import dump_json, load_payload_json
from .base import process_job

logger = logging.getLogger(__name__)

JOB_SUFFIX = ".json"
BAD_SUFFIX = ".bad"


class SpoolHandler:
    """Writes each payload as a job file in ``directory``.

    Files are written under a temporary name and renamed, so a worker never
    sees a partial job.
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def __call__(self, payload_value: dict[str, Any]) -> Path:
        name = f"{time.time_ns():020d}-{uuid4().hex}"
        tmp_path = self.directory / f"{name}.tmp"
        tmp_path.write_text(dump_json(payload_value), encoding="utf-8")
        job_path = self.directory / f"{name}{JOB_SUFFIX}"
        os.replace(tmp_path, job_path)
        return job_path


class SpoolWorker:
    """Delivers the jobs queued by a :class:`SpoolHandler`.

    A job file is removed only after it was processed; a worker that dies
    half way leaves it in place to be delivered again.
    """

    def __init__(self, directory: str | Path, configuration: Configuration | None = None) -> None:
        self.directory = Path(directory)
        self.configuration = configuration

    def pending(self) -> list[Path]:
        if not self.directory.exists():
            return []
        return sorted(self.directory.glob(f"*{JOB_SUFFIX}"))

    def drain(self) -> int:
        """Process every pending job once and return how many were delivered."""
        processed = 0
        for path in self.pending():
            try:
                payload_value = load_payload_json(path.read_text(encoding="utf-8"))
            except FileNotFoundError:
                continue
            except FaultpostLoadError as exc:
                logger.error("Unreadable job %s moved aside: %s", path.name, exc)
                path.replace(path.with_suffix(BAD_SUFFIX))
                continue

            process_job(payload_value, self.configuration)
            path.unlink(missing_ok=True)
            processed += 1
        return processed
