from __future__ import annotations

import json
from pathlib import Path

import pytest

from faultpost.exceptions import FaultpostLoadError
from faultpost.serializers import dump_json, iter_payload_lines, json_size, load_payload_json


def test_dump_json_is_compact_and_keeps_unicode() -> None:
    assert dump_json({"a": [1, 2], "b": "café"}) == '{"a":[1,2],"b":"café"}'


def test_dump_json_stringifies_unknown_values() -> None:
    assert json.loads(dump_json({"path": Path("/tmp/x")})) == {"path": "/tmp/x"}


def test_json_size_counts_utf8_bytes() -> None:
    assert json_size('"é"') == 4


def test_load_payload_json_accepts_text_and_bytes() -> None:
    assert load_payload_json('{"data": {}}') == {"data": {}}
    assert load_payload_json(b'{"data": {}}') == {"data": {}}


@pytest.mark.parametrize("text", ["{not json", '{"data": ', "[1, 2]", "null", b"\xff\xfe"])
def test_load_payload_json_rejects_bad_documents(text: str | bytes) -> None:
    with pytest.raises(FaultpostLoadError, match="Failed to parse payload JSON"):
        load_payload_json(text)


def test_iter_payload_lines_skips_blank_lines(tmp_path: Path) -> None:
    path = tmp_path / "payloads.jsonl"
    path.write_text('{"data": {"n": 1}}\n\n   \n{"data": {"n": 2}}\n', encoding="utf-8")

    assert [value["data"]["n"] for value in iter_payload_lines(path)] == [1, 2]


def test_iter_payload_lines_names_the_bad_line(tmp_path: Path) -> None:
    path = tmp_path / "payloads.jsonl"
    path.write_text('{"data": {}}\n"just a string"\n', encoding="utf-8")

    with pytest.raises(FaultpostLoadError, match="^line 2: "):
        list(iter_payload_lines(path))
