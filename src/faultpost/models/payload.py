"""Payload: a built report plus its access token, ready for delivery."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ..exceptions import PayloadTooLargeError
from ..serializers import dump_json, json_size, load_payload_json
from ..truncation import truncate, truncate_needed
from ..utils import deep_stringify_keys, sanitize

if TYPE_CHECKING:
    from ..core.config import Configuration


class Payload:
    """Sanitized report value.

    The value is copied into plain JSON-ready data on construction, so it
    can be handed to another thread or process without live references.
    """

    __slots__ = ("_value", "_configuration")

    def __init__(self, value: Mapping[str, Any] | str, configuration: Configuration) -> None:
        if isinstance(value, str):
            value = load_payload_json(value)
        self._value: dict[str, Any] = sanitize(value)
        self._configuration = configuration

    @property
    def value(self) -> dict[str, Any]:
        return self._value

    @property
    def configuration(self) -> Configuration:
        return self._configuration

    @property
    def data(self) -> dict[str, Any]:
        return self._value.get("data") or {}

    @property
    def access_token(self) -> str | None:
        return self._value.get("access_token")

    def __getitem__(self, key: str) -> Any:
        return self._value[key]

    def __repr__(self) -> str:
        return f"Payload({self._value!r})"

    @property
    def person_id(self) -> Any:
        person = self.data.get("person")
        if not isinstance(person, Mapping):
            return None
        return person.get(self._configuration.person_id_method)

    @property
    def ignored(self) -> bool:
        person_id = self.person_id
        if person_id is None or isinstance(person_id, (dict, list)):
            return False
        return person_id in self._configuration.ignored_person_ids

    def dump(self) -> str:
        """Serialize and truncate the payload for the wire.

        Raises ``PayloadTooLargeError`` when the payload cannot be shrunk
        under ``max_payload_size``.
        """
        max_size = self._configuration.max_payload_size
        result = truncate(deep_stringify_keys(self._value), max_size)
        if truncate_needed(result, max_size):
            raise PayloadTooLargeError(json_size(dump_json(self._value)), json_size(result))
        return result
