"""Append payloads to a local file, one JSON document per line."""

from __future__ import annotations

import threading
from pathlib import Path

_locks: dict[Path, threading.Lock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    with _locks_guard:
        lock = _locks.get(path)
        if lock is None:
            lock = _locks[path] = threading.Lock()
        return lock


class PayloadFileWriter:
    """Appends serialized payloads to ``path``.

    Writers for the same path share one lock, held only while a line is
    appended and flushed.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).resolve()

    def write(self, body: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with _lock_for(self.path), self.path.open("a", encoding="utf-8") as handle:
            handle.write(body + "\n")
            handle.flush()
