"""faultpost: error and message reporting to a remote collector.

Convenience API (delegates to a context-local default Notifier):
    faultpost.configure(...)         -> set up the process-wide configuration
    faultpost.error(exc, "context")  -> report an exception
    faultpost.scoped({...})          -> report with extra payload options
    faultpost.silenced()             -> keep exceptions raised inside from being reported

DI API (construct your own Notifier):
    from faultpost.core import Configuration, Notifier
    notifier = Notifier(Configuration(access_token="...", environment="production"))
    notifier.error(exc)
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from .core import Computed, Configuration, Notifier, Static
from .core.context import (
    clear_context,
    get_configuration,
    get_configuration_version,
    get_current_notifier,
    get_last_report,
    mark_configuration_changed,
    push_current_notifier,
    reset_current_notifier,
    set_configuration,
)
from .delay import SpoolHandler, SpoolWorker, ThreadHandler, ThreadPoolHandler
from .models import Payload
from .version import __version__


def configuration() -> Configuration:
    return get_configuration()


def configure(**options: Any) -> Configuration:
    """Update the process-wide configuration and enable reporting if still unset.

    Default notifiers of every thread pick the change up on their next use.
    """
    config = get_configuration()
    if config.enabled is None:
        config.enabled = True
    for name, value in options.items():
        setattr(config, name, value)
    mark_configuration_changed()
    return config


def reconfigure(**options: Any) -> Configuration:
    """Replace the process-wide configuration with a fresh, enabled one."""
    config = Configuration(enabled=True)
    set_configuration(config)
    push_current_notifier(None)
    return configure(**options)


def unconfigure() -> None:
    set_configuration(None)
    push_current_notifier(None)


def notifier() -> Notifier:
    """Return the notifier of the current thread or task, creating it on first use.

    Each default notifier works on its own clone of the process-wide
    configuration. After a ``configure`` call it is rebuilt from a fresh clone
    with its ``scope_in_place`` options replayed.
    """
    current = get_current_notifier()
    version = get_configuration_version()
    if current is None:
        current = _default_notifier(version)
        push_current_notifier(current)
    elif current.configuration_version is not None and current.configuration_version != version:
        current = _default_notifier(version, current.in_place_options)
        push_current_notifier(current)
    return current


def _default_notifier(version: int, in_place_options: dict[str, Any] | None = None) -> Notifier:
    current = Notifier(get_configuration().clone())
    current.configuration_version = version
    if in_place_options:
        current.scope_in_place(in_place_options)
    return current


def set_notifier(value: Notifier | None) -> None:
    push_current_notifier(value)


def reset_notifier() -> None:
    push_current_notifier(None)


@contextmanager
def scoped(options: Mapping[str, Any] | None = None) -> Iterator[Notifier]:
    """Report through a child notifier with ``options`` merged in for the block."""
    token = push_current_notifier(notifier().scope(options))
    try:
        yield get_current_notifier()  # type: ignore[misc]
    finally:
        reset_current_notifier(token)


@contextmanager
def silenced() -> Iterator[None]:
    with notifier().silenced():
        yield


def log(level: str, *args: Any) -> dict[str, Any] | str:
    return notifier().log(level, *args)


def debug(*args: Any) -> dict[str, Any] | str:
    return notifier().debug(*args)


def info(*args: Any) -> dict[str, Any] | str:
    return notifier().info(*args)


def warning(*args: Any) -> dict[str, Any] | str:
    return notifier().warning(*args)


warn = warning


def error(*args: Any) -> dict[str, Any] | str:
    return notifier().error(*args)


def critical(*args: Any) -> dict[str, Any] | str:
    return notifier().critical(*args)


def process_payload(payload: Payload) -> None:
    notifier().process_payload(payload)


def process_payload_safely(payload: Payload) -> None:
    notifier().process_payload_safely(payload)


def send_failsafe(message: str, exception: BaseException | None = None) -> None:
    notifier().send_failsafe(message, exception)


def last_report() -> dict[str, Any] | None:
    """Data of the last report sent from the current thread or task."""
    return get_last_report()


def _reset_default_notifier() -> None:
    """Reset process-wide state. Used by test fixtures."""
    set_configuration(None)
    clear_context()


__all__ = [
    "Computed",
    "Configuration",
    "Notifier",
    "Payload",
    "SpoolHandler",
    "SpoolWorker",
    "Static",
    "ThreadHandler",
    "ThreadPoolHandler",
    "__version__",
    "configuration",
    "configure",
    "critical",
    "debug",
    "error",
    "info",
    "last_report",
    "log",
    "notifier",
    "process_payload",
    "process_payload_safely",
    "reconfigure",
    "reset_notifier",
    "scoped",
    "send_failsafe",
    "set_notifier",
    "silenced",
    "unconfigure",
    "warn",
    "warning",
]
