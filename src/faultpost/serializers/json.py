"""JSON serialization helpers for report payloads."""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from ..exceptions import FaultpostLoadError


def dump_json(value: Any) -> str:
    """Serialize ``value`` as a compact JSON document."""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)


def json_size(serialized: str) -> int:
    """Size of a serialized document in UTF-8 bytes."""
    return len(serialized.encode("utf-8", errors="surrogatepass"))


def load_payload_json(payload: str | bytes) -> dict[str, Any]:
    """Parse a serialized payload value.

    Raises ``FaultpostLoadError`` on invalid JSON or when the document is not
    an object.
    """
    try:
        value = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise FaultpostLoadError(f"Failed to parse payload JSON: {exc}") from exc
    if not isinstance(value, dict):
        raise FaultpostLoadError(
            f"Failed to parse payload JSON: expected an object, got {type(value).__name__}"
        )
    return value


def iter_payload_lines(path: str | Path) -> Iterator[dict[str, Any]]:
    """Yield each payload of a one-document-per-line file.

    Blank lines are skipped. Raises ``FaultpostLoadError`` naming the line
    number of the first unparseable document.
    """
    with Path(path).open(encoding="utf-8") as handle:
        for lineno, line in enumerate(handle, 1):
            if not line.strip():
                continue
            try:
                yield load_payload_json(line)
            except FaultpostLoadError as exc:
                raise FaultpostLoadError(f"line {lineno}: {exc}") from exc
