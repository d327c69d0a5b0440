"""Fit a serialized payload under the size ceiling."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from ..serializers import dump_json, json_size
from ..utils import deep_copy
from .strategies import Strategy, default_strategies

MAX_PAYLOAD_SIZE = 128 * 1024


def truncate(
    payload: Mapping[str, Any],
    max_size: int = MAX_PAYLOAD_SIZE,
    strategies: Sequence[Strategy] | None = None,
) -> str:
    """Serialize ``payload``, shrinking it until it fits in ``max_size`` bytes.

    Strategies run in order on a working copy and the first result that fits
    is returned. A payload already under the limit is serialized unchanged.
    When no strategy is enough the last (smallest) result is returned;
    callers check it with :func:`truncate_needed`.
    """
    working = deep_copy(payload)
    result = dump_json(working)
    for strategy in strategies if strategies is not None else default_strategies():
        strategy(working)
        result = dump_json(working)
        if not truncate_needed(result, max_size):
            return result
    return result


def truncate_needed(serialized: str, max_size: int = MAX_PAYLOAD_SIZE) -> bool:
    return json_size(serialized) > max_size


__all__ = ["MAX_PAYLOAD_SIZE", "truncate", "truncate_needed"]
