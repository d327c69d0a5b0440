from __future__ import annotations

import json
import logging
from pathlib import Path

import httpx
import pytest

from faultpost.core import Configuration, Notifier
from faultpost.transport import ACCESS_TOKEN_HEADER, HttpTransport, PayloadFileWriter

ENDPOINT = "https://collector.test/api/1/item/"


def _client(status_code: int, requests: list[httpx.Request], text: str = "") -> httpx.Client:
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status_code, text=text)

    return httpx.Client(transport=httpx.MockTransport(handler))


def test_http_transport_posts_body_with_token_header(caplog: pytest.LogCaptureFixture) -> None:
    requests: list[httpx.Request] = []
    transport = HttpTransport(ENDPOINT, client=_client(200, requests))

    with caplog.at_level(logging.INFO):
        transport.send('{"data": {"level": "error"}}', "token-123")

    assert len(requests) == 1
    request = requests[0]
    assert request.method == "POST"
    assert str(request.url) == ENDPOINT
    assert request.headers[ACCESS_TOKEN_HEADER] == "token-123"
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content) == {"data": {"level": "error"}}
    assert "Success" in caplog.text


def test_http_transport_omits_missing_token() -> None:
    requests: list[httpx.Request] = []
    HttpTransport(ENDPOINT, client=_client(200, requests)).send("{}", None)
    assert ACCESS_TOKEN_HEADER not in requests[0].headers


def test_http_transport_logs_unexpected_status(caplog: pytest.LogCaptureFixture) -> None:
    requests: list[httpx.Request] = []
    transport = HttpTransport(ENDPOINT, client=_client(500, requests, text="overloaded"))

    with caplog.at_level(logging.INFO):
        transport.send("{}", "token")

    assert "Got unexpected status code from the collector: 500" in caplog.text
    assert "Response: overloaded" in caplog.text


def test_http_transport_propagates_network_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    transport = HttpTransport(ENDPOINT, client=httpx.Client(transport=httpx.MockTransport(handler)))
    with pytest.raises(httpx.ConnectError):
        transport.send("{}", "token")


def test_notifier_sends_through_http_transport() -> None:
    requests: list[httpx.Request] = []
    configuration = Configuration(
        enabled=True,
        access_token="token-abc",
        transport=HttpTransport(ENDPOINT, client=_client(200, requests)),
    )

    result = Notifier(configuration).error("over http")

    assert isinstance(result, dict)
    sent = json.loads(requests[0].content)
    assert sent["access_token"] == "token-abc"
    assert sent["data"]["uuid"] == result["uuid"]


def test_file_writer_appends_lines_and_creates_parents(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "out.jsonl"
    writer = PayloadFileWriter(path)

    writer.write('{"a": 1}')
    PayloadFileWriter(str(path)).write('{"b": 2}')

    assert path.read_text(encoding="utf-8") == '{"a": 1}\n{"b": 2}\n'
