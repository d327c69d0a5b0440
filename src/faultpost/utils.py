"""Helpers for merging, copying and sanitizing nested payload data."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from enum import Enum
from typing import Any

MAX_DEPTH = 32
CYCLE_MARKER = "<cycle>"
DEPTH_MARKER = "<max depth>"


def deep_merge(target: dict[Any, Any], source: Mapping[Any, Any]) -> dict[Any, Any]:
    """Merge ``source`` into ``target`` in place and return ``target``.

    Nested mappings are merged key by key; any other value in ``source``
    replaces the one in ``target``.
    """
    for key, value in source.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            deep_merge(current, value)
        else:
            target[key] = value
    return target


def deep_copy(value: Any) -> Any:
    """Copy dicts and lists recursively. Leaves are shared, not copied."""
    if isinstance(value, Mapping):
        return {key: deep_copy(item) for key, item in value.items()}
    if isinstance(value, list):
        return [deep_copy(item) for item in value]
    return value


def deep_stringify_keys(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(key): deep_stringify_keys(item) for key, item in value.items()}
    if isinstance(value, list):
        return [deep_stringify_keys(item) for item in value]
    return value


def enforce_valid_utf8(value: str | bytes) -> str:
    """Return ``value`` as a str whose UTF-8 encoding is valid.

    Undecodable bytes and lone surrogates are replaced with the empty string.
    """
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="ignore")
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return value.encode("utf-8", errors="ignore").decode("utf-8")
    return value


def sanitize(value: Any) -> Any:
    """Return a plain, JSON-ready copy of ``value``.

    The copy contains only dicts with str keys, lists, str, int, float, bool
    and None. Strings are valid UTF-8, cyclic references are replaced with
    ``CYCLE_MARKER`` and anything nested deeper than ``MAX_DEPTH`` with
    ``DEPTH_MARKER``. Unknown objects become their ``repr``.
    """
    return _sanitize(value, 0, set())


def _sanitize(value: Any, depth: int, ancestors: set[int]) -> Any:
    if value is None or isinstance(value, (bool, int, float)):
        if isinstance(value, Enum):
            return _sanitize(value.value, depth, ancestors)
        return value
    if isinstance(value, (str, bytes)):
        return enforce_valid_utf8(value)
    if isinstance(value, Enum):
        return _sanitize(value.value, depth, ancestors)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (Mapping, list, tuple, set, frozenset)):
        if id(value) in ancestors:
            return CYCLE_MARKER
        if depth >= MAX_DEPTH:
            return DEPTH_MARKER
        ancestors.add(id(value))
        try:
            if isinstance(value, Mapping):
                return {
                    _sanitize_key(key): _sanitize(item, depth + 1, ancestors)
                    for key, item in value.items()
                }
            return [_sanitize(item, depth + 1, ancestors) for item in value]
        finally:
            ancestors.discard(id(value))
    return enforce_valid_utf8(_safe_repr(value))


def _sanitize_key(key: Any) -> str:
    if isinstance(key, (str, bytes)):
        return enforce_valid_utf8(key)
    if isinstance(key, Enum):
        return str(key.value)
    return str(key)


def _safe_repr(value: object) -> str:
    try:
        return repr(value)
    except Exception:
        return f"<unrepresentable {type(value).__name__}>"
