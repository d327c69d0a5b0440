"""Inspect subcommand implementation."""

from __future__ import annotations

import json
import sys
from collections import Counter
from pathlib import Path
from typing import Any, Literal

from ..exceptions import FaultpostLoadError
from ..models import Level
from ..renderers import render_report
from ..serializers import iter_payload_lines

VerbosityArg = Literal["minimal", "standard", "full"]


def run_inspect(
    payload_file: Path,
    verbosity: VerbosityArg,
    *,
    as_json: bool,
    output_path: Path | None,
) -> int:
    if output_path is not None and not as_json:
        raise ValueError("--output is only supported when --json is provided")

    try:
        payloads = list(iter_payload_lines(payload_file))
    except FileNotFoundError:
        print(f"Error: file not found: {payload_file}", file=sys.stderr)
        return 1
    except FaultpostLoadError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Error reading file: {exc}", file=sys.stderr)
        return 1
    summary = _build_summary(payloads)

    if as_json:
        text = json.dumps(summary, ensure_ascii=True, sort_keys=True)
        if output_path is not None:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(text + "\n", encoding="utf-8")
        else:
            print(text)
        return 0

    print(f"File: {payload_file}")
    print(f"Reports: {summary['report_count']}")
    print(f"Failsafe reports: {summary['failsafe_count']}")
    print("Level counts:")
    for level, count in summary["level_counts"].items():
        print(f"  - {level}: {count}")
    for value in payloads:
        print()
        print(render_report(value, verbosity=verbosity))
    return 0


def _build_summary(payloads: list[dict[str, Any]]) -> dict[str, object]:
    datas = [value.get("data") or {} for value in payloads]
    level_counts = Counter(str(data.get("level", "unknown")) for data in datas)
    full_level_counts = {level.value: int(level_counts.pop(level.value, 0)) for level in Level}
    full_level_counts.update(sorted(level_counts.items()))
    exception_counts = Counter(
        trace["exception"]["class"]
        for data in datas
        for trace in _traces(data)
        if isinstance(trace.get("exception"), dict) and "class" in trace["exception"]
    )

    return {
        "report_count": len(payloads),
        "failsafe_count": sum(1 for data in datas if data.get("failsafe")),
        "level_counts": full_level_counts,
        "exception_counts": dict(sorted(exception_counts.items())),
        "environments": sorted({str(data.get("environment", "")) for data in datas}),
    }


def _traces(data: dict[str, Any]) -> list[dict[str, Any]]:
    body = data.get("body") or {}
    if body.get("trace_chain"):
        return list(body["trace_chain"])
    if body.get("trace"):
        return [body["trace"]]
    return []
