"""Rich-based report console rendering."""

from __future__ import annotations

import json
from collections.abc import Mapping
from io import StringIO
from typing import Any, Literal

from rich.console import Console
from rich.tree import Tree

Verbosity = Literal["minimal", "standard", "full"]
_MAX_VALUE_LEN = 200


def render_report(value: Mapping[str, Any], *, verbosity: Verbosity = "standard") -> str:
    """Render one payload value (``{"access_token", "data"}``) as a text tree."""
    data = value.get("data") or {}
    tree = Tree(_report_label(data))
    body = data.get("body") or {}

    traces = body.get("trace_chain") or ([body["trace"]] if body.get("trace") else [])
    for index, trace in enumerate(traces):
        _add_trace_branch(tree, trace, caused=index > 0, verbosity=verbosity)

    message = body.get("message")
    if isinstance(message, Mapping):
        branch = tree.add(f"message: {message.get('body', '')}")
        if verbosity == "full" and message.get("extra"):
            branch.add(f"extra: {_format_data(message['extra'])}")

    if verbosity != "minimal":
        for key in ("person", "request", "context"):
            if data.get(key):
                tree.add(f"{key}: {_format_data(data[key])}")

    console = Console(record=True, width=120, markup=False, file=StringIO())
    console.print(tree)
    return console.export_text()


def _report_label(data: Mapping[str, Any]) -> str:
    level = str(data.get("level", "?")).upper()
    environment = data.get("environment") or "unspecified"
    label = f"Report: {level} [{environment}]"
    if data.get("uuid"):
        label += f" {data['uuid']}"
    if data.get("failsafe"):
        label += " (failsafe)"
    return label


def _add_trace_branch(tree: Tree, trace: Mapping[str, Any], *, caused: bool, verbosity: Verbosity) -> None:
    exception = trace.get("exception") or {}
    prefix = "caused by " if caused else ""
    branch = tree.add(f"{prefix}{exception.get('class', '?')}: {exception.get('message', '')}")

    if verbosity == "minimal":
        return

    if exception.get("description"):
        branch.add(f'description: "{exception["description"]}"')

    frames = trace.get("frames") or []
    shown = frames if verbosity == "full" else frames[-3:]
    for frame in shown:
        method = frame.get("method") or "?"
        branch.add(f"{frame.get('filename', '?')}:{frame.get('lineno', 0)} in {method}")

    if verbosity == "full" and trace.get("extra"):
        branch.add(f"extra: {_format_data(trace['extra'])}")


def _format_data(data: Any) -> str:
    """Format a value for display, truncating large values."""
    try:
        s = json.dumps(data, ensure_ascii=False)
    except (TypeError, ValueError):
        s = str(data)
    if len(s) <= _MAX_VALUE_LEN:
        return s
    return s[:_MAX_VALUE_LEN] + "... [truncated]"
