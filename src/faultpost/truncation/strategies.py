"""Shrink strategies applied, in order, to an oversized payload.

Every strategy mutates a working copy of the payload in place and is applied
on top of the strategies before it, so later strategies are always at least
as destructive as earlier ones.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

FRAMES_RANGE = 150
STRING_THRESHOLDS = (1024, 512, 256)
MIN_MESSAGE_LENGTH = 255
ELLIPSIS = "..."
PRESERVED_EXCEPTION_KEYS = ("class", "message")

Strategy = Callable[[dict[str, Any]], None]


def raw(payload: dict[str, Any]) -> None:
    """Leave the payload as it is."""


def frames(payload: dict[str, Any]) -> None:
    """Keep only the outermost and innermost ``FRAMES_RANGE`` frames of each trace."""
    for trace in _traces(payload):
        trace_frames = trace.get("frames")
        if isinstance(trace_frames, list) and len(trace_frames) > FRAMES_RANGE * 2:
            trace["frames"] = trace_frames[:FRAMES_RANGE] + trace_frames[-FRAMES_RANGE:]


def code_snippets(payload: dict[str, Any]) -> None:
    """Drop the source line attached to each frame."""
    for trace in _traces(payload):
        for frame in trace.get("frames") or []:
            if isinstance(frame, dict):
                frame.pop("code", None)


def strings(payload: dict[str, Any], threshold: int) -> None:
    """Shorten every string longer than ``threshold`` characters.

    Exception class names and messages are left to ``min_body``.
    """
    kept = [
        (exception, {key: exception[key] for key in PRESERVED_EXCEPTION_KEYS if key in exception})
        for exception in _exceptions(payload)
    ]
    _shorten_strings(payload, threshold)
    for exception, values in kept:
        exception.update(values)


def string_strategies() -> list[Strategy]:
    return [lambda payload, t=threshold: strings(payload, t) for threshold in STRING_THRESHOLDS]


def extra_data(payload: dict[str, Any]) -> None:
    """Drop whole sub-trees that are not needed to identify the error."""
    data = _data(payload)
    for trace in _traces(payload):
        trace.pop("extra", None)
    body = data.get("body")
    if isinstance(body, dict) and isinstance(body.get("message"), dict):
        body["message"].pop("extra", None)
    request = data.get("request")
    if isinstance(request, dict):
        for key in ("body", "POST", "params"):
            request.pop(key, None)
    data.pop("custom", None)


def min_body(payload: dict[str, Any]) -> None:
    """Reduce each trace to its exception and its first and last frame."""
    for trace in _traces(payload):
        exception = trace.get("exception")
        if isinstance(exception, dict):
            exception.pop("description", None)
            message = exception.get("message")
            if isinstance(message, str):
                exception["message"] = _shorten(message, MIN_MESSAGE_LENGTH)
        trace_frames = trace.get("frames")
        if isinstance(trace_frames, list) and len(trace_frames) > 2:
            trace["frames"] = [trace_frames[0], trace_frames[-1]]
    body = _data(payload).get("body")
    if isinstance(body, dict) and isinstance(body.get("message"), dict):
        message_body = body["message"].get("body")
        if isinstance(message_body, str):
            body["message"]["body"] = _shorten(message_body, MIN_MESSAGE_LENGTH)


def default_strategies() -> list[Strategy]:
    return [raw, frames, code_snippets, extra_data, *string_strategies(), min_body]


def _data(payload: dict[str, Any]) -> dict[str, Any]:
    data = payload.get("data")
    return data if isinstance(data, dict) else {}


def _traces(payload: dict[str, Any]) -> Iterator[dict[str, Any]]:
    body = _data(payload).get("body")
    if not isinstance(body, dict):
        return
    if isinstance(body.get("trace"), dict):
        yield body["trace"]
    for trace in body.get("trace_chain") or []:
        if isinstance(trace, dict):
            yield trace


def _exceptions(payload: dict[str, Any]) -> Iterator[dict[str, Any]]:
    for trace in _traces(payload):
        exception = trace.get("exception")
        if isinstance(exception, dict):
            yield exception


def _shorten(value: str, limit: int) -> str:
    if len(value) <= limit:
        return value
    return value[: max(limit - len(ELLIPSIS), 0)] + ELLIPSIS


def _shorten_strings(value: Any, threshold: int) -> None:
    if isinstance(value, dict):
        for key, item in value.items():
            if isinstance(item, str):
                value[key] = _shorten(item, threshold)
            else:
                _shorten_strings(item, threshold)
    elif isinstance(value, list):
        for index, item in enumerate(value):
            if isinstance(item, str):
                value[index] = _shorten(item, threshold)
            else:
                _shorten_strings(item, threshold)
