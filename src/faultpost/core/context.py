"""Context propagation primitives for the default notifier and configuration."""

from __future__ import annotations

import contextvars
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, ParamSpec, TypeVar

from .config import Configuration

if TYPE_CHECKING:
    from .notifier import Notifier

P = ParamSpec("P")
R = TypeVar("R")

_current_notifier: contextvars.ContextVar[Notifier | None] = contextvars.ContextVar(
    "faultpost_current_notifier",
    default=None,
)
_last_report: contextvars.ContextVar[dict[str, Any] | None] = contextvars.ContextVar(
    "faultpost_last_report",
    default=None,
)

_configuration: Configuration | None = None
_configuration_version = 0
_configuration_lock = threading.Lock()


def get_configuration() -> Configuration:
    """Return the process-wide configuration, creating it on first use."""
    global _configuration
    with _configuration_lock:
        if _configuration is None:
            _configuration = Configuration()
        return _configuration


def set_configuration(configuration: Configuration | None) -> None:
    global _configuration, _configuration_version
    with _configuration_lock:
        _configuration = configuration
        _configuration_version += 1


def get_configuration_version() -> int:
    """Counter bumped on every change made through the top-level configure API."""
    with _configuration_lock:
        return _configuration_version


def mark_configuration_changed() -> None:
    global _configuration_version
    with _configuration_lock:
        _configuration_version += 1


def get_current_notifier() -> Notifier | None:
    return _current_notifier.get()


def push_current_notifier(notifier: Notifier | None) -> contextvars.Token[Notifier | None]:
    return _current_notifier.set(notifier)


def reset_current_notifier(token: contextvars.Token[Notifier | None]) -> None:
    _current_notifier.reset(token)


def get_last_report() -> dict[str, Any] | None:
    return _last_report.get()


def set_last_report(report: dict[str, Any] | None) -> None:
    _last_report.set(report)


def clear_context() -> None:
    _current_notifier.set(None)
    _last_report.set(None)


def propagate_context(func: Callable[P, R]) -> Callable[P, R]:
    """Copy contextvars to a callable for thread execution."""
    copied_context = contextvars.copy_context()

    def wrapped(*args: P.args, **kwargs: P.kwargs) -> R:
        return copied_context.run(func, *args, **kwargs)

    return wrapped
