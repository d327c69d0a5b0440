"""Edge-case tests for hostile inputs, misbehaving user code and logging."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from faultpost.core import ERROR, Configuration, Notifier

from .conftest import RecordingTransport, raise_and_catch

# ---------------------------------------------------------------------------
# 1. Values that cannot be printed or serialized
# ---------------------------------------------------------------------------


class _Unprintable(Exception):
    def __str__(self) -> str:
        raise RuntimeError("no str")


class _NoRepr:
    def __repr__(self) -> str:
        raise RuntimeError("no repr")


def test_exception_with_broken_str_is_still_reported(
    notifier: Notifier, transport: RecordingTransport
) -> None:
    result = notifier.error(raise_and_catch(_Unprintable()))

    assert isinstance(result, dict)
    assert transport.datas[0]["body"]["trace"]["exception"]["message"] == "<unprintable _Unprintable>"


def test_extra_with_unserializable_values(notifier: Notifier, transport: RecordingTransport) -> None:
    cyclic: dict[str, Any] = {}
    cyclic["me"] = cyclic
    extra = {"obj": _NoRepr(), "cyclic": cyclic, "raw": b"\xff\xfebytes", 3: "int key"}

    result = notifier.info("hostile extra", extra)

    assert isinstance(result, dict)
    sent = transport.datas[0]["body"]["message"]["extra"]
    assert sent == {"obj": "<unrepresentable _NoRepr>", "cyclic": {"me": "<cycle>"}, "raw": "bytes", "3": "int key"}


def test_non_utf8_message_bytes_in_options(notifier: Notifier, transport: RecordingTransport) -> None:
    notifier.configuration.payload_options = {"request": {"body": b"\xc3\x28ok"}}
    notifier.info("x")
    assert transport.datas[0]["request"] == {"body": "(ok"}


# ---------------------------------------------------------------------------
# 2. Misbehaving option providers
# ---------------------------------------------------------------------------


def test_failing_person_provider_becomes_an_internal_error(
    notifier: Notifier, transport: RecordingTransport
) -> None:
    def person() -> dict[str, Any]:
        raise LookupError("session expired")

    notifier.configuration.payload_options = {"person": person}

    assert notifier.error("boom") == ERROR
    # The internal error report runs the same provider, so only the failsafe gets out.
    assert len(transport.sent) == 1
    assert transport.datas[0]["failsafe"] is True


def test_level_filter_that_raises(notifier: Notifier, transport: RecordingTransport) -> None:
    def choose(exc: BaseException) -> str:
        raise RuntimeError("filter broke")

    notifier.configuration.exception_level_filters = {"ValueError": choose}
    exc = raise_and_catch(ValueError("v"))

    assert notifier.error(exc, {"use_exception_level_filters": True}) == ERROR
    assert transport.datas[0]["body"]["trace"]["exception"]["class"] == "RuntimeError"


# ---------------------------------------------------------------------------
# 3. Logging
# ---------------------------------------------------------------------------


def test_configured_logger_receives_messages(transport: RecordingTransport, caplog: pytest.LogCaptureFixture) -> None:
    app_logger = logging.getLogger("app.errors")
    notifier = Notifier(Configuration(enabled=True, transport=transport, logger=app_logger))

    with caplog.at_level(logging.INFO, logger="app.errors"):
        notifier.info("hello")

    assert {record.name for record in caplog.records} == {"app.errors"}
    assert any(record.getMessage() == "Scheduling payload" for record in caplog.records)


def test_instance_link_is_logged(notifier: Notifier, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO):
        result = notifier.info("hello")

    assert isinstance(result, dict)
    assert f"/instance/uuid?uuid={result['uuid']}" in caplog.text
