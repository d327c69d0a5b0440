"""Configuration for a Notifier instance."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from ..truncation import MAX_PAYLOAD_SIZE
from ..utils import deep_copy

T = TypeVar("T")

DEFAULT_ENDPOINT = "https://api.faultpost.io/api/1/item/"
DEFAULT_WEB_BASE = "https://faultpost.io"


@dataclass(frozen=True)
class Static(Generic[T]):
    """An option whose value is used as is."""

    value: T


@dataclass(frozen=True)
class Computed(Generic[T]):
    """An option whose value is produced by calling ``func`` at build time."""

    func: Callable[..., T]


def resolve_option(option: Any, *args: Any) -> Any:
    """Resolve a ``Static``, ``Computed`` or plain-callable option value."""
    if isinstance(option, Static):
        return option.value
    if isinstance(option, Computed):
        return option.func(*args)
    if callable(option):
        return option(*args)
    return option


class Configuration(BaseModel):
    """Validated notifier settings.

    A child notifier works on a :meth:`clone`, so changing a child's
    ``payload_options`` never reaches its parent.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)

    access_token: str | None = None
    endpoint: str = DEFAULT_ENDPOINT
    web_base: str = DEFAULT_WEB_BASE
    environment: str | None = None
    framework: str | None = None
    root: str | None = None
    branch: str | None = None
    code_version: str | None = None
    project_package_paths: list[str] | None = None
    enabled: bool | None = None
    request_timeout: float = 3.0
    max_payload_size: int = MAX_PAYLOAD_SIZE

    use_async: bool = False
    async_handler: Callable[..., Any] | None = None
    failover_handlers: list[Callable[..., Any]] = Field(default_factory=list)

    write_to_file: bool = False
    filepath: str | None = None

    exception_level_filters: dict[str, Any] = Field(default_factory=dict)
    ignored_person_ids: set[Any] = Field(default_factory=set)
    person_id_method: str = "id"
    custom_data_method: Callable[[], Any] | None = None
    payload_options: dict[str, Any] = Field(default_factory=dict)
    populate_empty_backtraces: bool = False
    safely: bool = False

    logger: logging.Logger | None = None
    transport: Any = None

    def clone(self) -> Configuration:
        return self.model_copy(
            update={
                "payload_options": deep_copy(self.payload_options),
                "failover_handlers": list(self.failover_handlers),
                "exception_level_filters": dict(self.exception_level_filters),
                "ignored_person_ids": set(self.ignored_person_ids),
                "project_package_paths": (
                    list(self.project_package_paths)
                    if self.project_package_paths is not None
                    else None
                ),
            }
        )
