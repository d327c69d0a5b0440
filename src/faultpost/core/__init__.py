"""Core reporting runtime."""

from .builder import PayloadBuilder
from .config import Computed, Configuration, Static, resolve_option
from .context import clear_context, get_current_notifier, get_last_report, propagate_context
from .failsafe import FailsafeBuilder
from .notifier import DISABLED, ERROR, IGNORED, Notifier

__all__ = [
    "DISABLED",
    "ERROR",
    "IGNORED",
    "Computed",
    "Configuration",
    "FailsafeBuilder",
    "Notifier",
    "PayloadBuilder",
    "Static",
    "clear_context",
    "get_current_notifier",
    "get_last_report",
    "propagate_context",
    "resolve_option",
]
