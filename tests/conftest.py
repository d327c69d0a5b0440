from __future__ import annotations

import json
from typing import Any

import pytest

import faultpost
from faultpost.core import Configuration, Notifier


def reset_faultpost_config() -> None:
    """Reset the process-wide configuration and default notifier between tests."""
    faultpost._reset_default_notifier()


class RecordingTransport:
    """Transport double that keeps every parsed payload it was asked to send."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[tuple[dict[str, Any], str | None]] = []

    def send(self, body: str, access_token: str | None) -> None:
        if self.fail:
            raise ConnectionError("collector unreachable")
        self.sent.append((json.loads(body), access_token))

    @property
    def datas(self) -> list[dict[str, Any]]:
        return [value["data"] for value, _ in self.sent]


class RecordingHandler:
    """Async handler double."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[dict[str, Any]] = []

    def __call__(self, payload_value: dict[str, Any]) -> None:
        self.calls.append(payload_value)
        if self.fail:
            raise RuntimeError("handler down")


def raise_and_catch(exc: BaseException) -> BaseException:
    """Raise ``exc`` so it carries a traceback, and return it."""
    try:
        raise exc
    except BaseException as caught:
        return caught


@pytest.fixture(autouse=True)
def _reset_config() -> None:
    reset_faultpost_config()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def configuration(transport: RecordingTransport) -> Configuration:
    return Configuration(
        enabled=True,
        access_token="token-123",
        environment="test",
        transport=transport,
    )


@pytest.fixture
def notifier(configuration: Configuration) -> Notifier:
    return Notifier(configuration)
