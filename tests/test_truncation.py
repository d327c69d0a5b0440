from __future__ import annotations

import json
from typing import Any

from faultpost.serializers import dump_json, json_size
from faultpost.truncation import MAX_PAYLOAD_SIZE, truncate, truncate_needed
from faultpost.truncation.strategies import FRAMES_RANGE, MIN_MESSAGE_LENGTH


def _trace_payload(frame_count: int = 3, extra: dict[str, Any] | None = None) -> dict[str, Any]:
    frames = [
        {"filename": f"app/module_{i}.py", "lineno": i, "method": f"func_{i}", "code": "x = compute()" * 15}
        for i in range(frame_count)
    ]
    trace: dict[str, Any] = {
        "frames": frames,
        "exception": {"class": "ValueError", "message": "bad value"},
    }
    if extra is not None:
        trace["extra"] = extra
    return {"access_token": "token", "data": {"level": "error", "body": {"trace": trace}}}


def test_payload_under_limit_is_returned_unchanged() -> None:
    payload = _trace_payload()
    result = truncate(payload)

    assert json.loads(result) == payload
    assert result == dump_json(payload)
    assert not truncate_needed(result)


def test_long_string_is_shortened_and_result_stays_valid() -> None:
    payload = {"access_token": "token", "data": {"body": {"message": {"body": "x" * 200_000}}}}
    result = truncate(payload)

    assert json_size(result) <= MAX_PAYLOAD_SIZE
    parsed = json.loads(result)
    body = parsed["data"]["body"]["message"]["body"]
    assert body.startswith("xxx")
    assert body.endswith("...")
    assert len(body) < 200_000
    assert parsed["access_token"] == "token"


def test_multibyte_strings_fit_in_bytes() -> None:
    payload = {"access_token": "token", "data": {"body": {"message": {"body": "é" * 100_000}}}}
    result = truncate(payload)

    assert json_size(result) <= MAX_PAYLOAD_SIZE
    json.loads(result)


def test_frames_strategy_keeps_outermost_and_innermost_frames() -> None:
    payload = _trace_payload(frame_count=1000)
    assert truncate_needed(dump_json(payload))

    result = json.loads(truncate(payload))
    frames = result["data"]["body"]["trace"]["frames"]

    assert len(frames) == FRAMES_RANGE * 2
    assert frames[0]["method"] == "func_0"
    assert frames[-1]["method"] == "func_999"
    assert result["data"]["body"]["trace"]["exception"] == {"class": "ValueError", "message": "bad value"}


def test_extra_data_is_dropped_when_strings_are_already_short() -> None:
    extra = {f"key_{i}": "v" * 200 for i in range(2000)}
    payload = _trace_payload(extra=extra)

    result = truncate(payload)
    parsed = json.loads(result)

    assert json_size(result) <= MAX_PAYLOAD_SIZE
    assert "extra" not in parsed["data"]["body"]["trace"]
    assert parsed["data"]["body"]["trace"]["exception"]["class"] == "ValueError"


def test_min_body_shortens_exception_messages_in_a_trace_chain() -> None:
    chain = [
        {
            "frames": [{"filename": "a.py", "lineno": i, "method": "m"} for i in range(5)],
            "exception": {"class": "KeyError", "message": "k" * 300, "description": "d" * 300},
        }
        for _ in range(3)
    ]
    payload = {"access_token": "token", "data": {"body": {"trace_chain": chain}}}
    max_size = 1500

    result = truncate(payload, max_size)
    parsed = json.loads(result)

    assert json_size(result) <= max_size
    for trace in parsed["data"]["body"]["trace_chain"]:
        assert len(trace["exception"]["message"]) <= MIN_MESSAGE_LENGTH
        assert len(trace["frames"]) == 2


def test_truncation_can_be_exhausted() -> None:
    payload = {"access_token": "token", "data": {"numbers": list(range(100_000))}}
    result = truncate(payload)

    assert truncate_needed(result)
    assert json.loads(result)["data"]["numbers"][:3] == [0, 1, 2]


def test_truncate_does_not_mutate_its_input() -> None:
    payload = {"access_token": "token", "data": {"body": {"message": {"body": "x" * 200_000}}}}
    truncate(payload)
    assert len(payload["data"]["body"]["message"]["body"]) == 200_000


def test_truncate_needed_uses_byte_size() -> None:
    assert truncate_needed("é" * 6, max_size=10)
    assert not truncate_needed("e" * 10, max_size=10)


def test_exception_message_survives_when_dropping_extra_is_enough() -> None:
    message = "m" * 2000
    extra = {f"key_{i}": "v" * 100 for i in range(2000)}
    payload = _trace_payload(extra=extra)
    payload["data"]["body"]["trace"]["exception"]["message"] = message

    parsed = json.loads(truncate(payload))
    trace = parsed["data"]["body"]["trace"]

    assert "extra" not in trace
    assert trace["exception"]["message"] == message


def test_string_shortening_leaves_exception_class_and_message_alone() -> None:
    message = "m" * 2000
    payload = _trace_payload()
    payload["data"]["body"]["trace"]["exception"]["message"] = message
    payload["data"]["server"] = {"notes": "n" * 200_000}

    result = truncate(payload)
    parsed = json.loads(result)

    assert json_size(result) <= MAX_PAYLOAD_SIZE
    assert len(parsed["data"]["server"]["notes"]) < 200_000
    assert parsed["data"]["body"]["trace"]["exception"] == {"class": "ValueError", "message": message}
