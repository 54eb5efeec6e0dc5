import json

import pytest

from courier.networking.classifier import (
    LastError,
    Outcome,
    ResponseClassifier,
    result_payload,
)
from courier.networking.headers import parse_headers
from courier.networking.transport import RawExchange

URL = "http://example.com/resource"


def _exchange(status, body=b"", error=None):
    return RawExchange(
        status_code=status,
        raw_headers=b"HTTP/1.1 X\r\nSet-Cookie: a=1\r\nSet-Cookie: b=2\r\n\r\n"
        if status
        else b"",
        body=body,
        info={"http_code": status, "url": URL},
        error=error,
    )


@pytest.fixture
def classifier(recording_logger):
    return ResponseClassifier(recording_logger)


def _classify(classifier, exchange):
    return classifier.classify(exchange, parse_headers(exchange.raw_headers), URL)


@pytest.mark.parametrize("status", [100, 200, 204, 301, 304, 399])
def test_success_range_has_no_error_and_no_log(status, classifier, recording_logger):
    result = _classify(classifier, _exchange(status))

    assert result.outcome is Outcome.SUCCESS
    assert result.last_error is None
    assert recording_logger.records == []


def test_transport_failure_uses_error_description(classifier, recording_logger):
    result = _classify(classifier, _exchange(0, error="Connection refused"))

    assert result.outcome is Outcome.TRANSPORT_FAILURE
    assert result.last_error == LastError(
        0, f"HTTP call to [{URL}] failed: [Connection refused]"
    )
    assert recording_logger.records == []


def test_transport_failure_without_description(classifier):
    result = _classify(classifier, _exchange(0))

    assert result.last_error.code == 0
    assert "failed, but for an unknown reason" in result.last_error.message
    assert URL in result.last_error.message


@pytest.mark.parametrize("status", [400, 404, 429, 499])
def test_client_error_records_payload_and_logs_error(status, classifier, recording_logger):
    result = _classify(classifier, _exchange(status, body=b"nope"))

    assert result.outcome is Outcome.CLIENT_ERROR
    assert result.last_error.code == status
    payload = json.loads(result.last_error.message)
    assert payload["http_code"] == status
    assert payload["http_body"] == "nope"
    assert payload["http_header"]["Set-Cookie"] == ["a=1", "b=2"]
    assert payload["info"]["url"] == URL
    (message,) = recording_logger.messages("error")
    assert f"[ERROR] {status} URL: {URL}" in message
    assert recording_logger.messages("fatal") == []


@pytest.mark.parametrize("status", [500, 502, 503, 599])
def test_server_error_records_payload_and_logs_fatal(status, classifier, recording_logger):
    result = _classify(classifier, _exchange(status, body=b"boom"))

    assert result.outcome is Outcome.SERVER_ERROR
    assert result.last_error.code == status
    assert json.loads(result.last_error.message)["http_body"] == "boom"
    (message,) = recording_logger.messages("fatal")
    assert f"[FATAL] {status} URL: {URL}" in message
    assert "boom" in message
    assert recording_logger.messages("error") == []


def test_payload_replaces_undecodable_body_bytes():
    exchange = _exchange(500, body=b"\xff\xfe")

    payload = result_payload(exchange, parse_headers(exchange.raw_headers))

    assert payload["http_body"] == "��"
    json.dumps(payload)


def test_payload_keeps_status_line_under_sentinel_key():
    exchange = _exchange(404)

    payload = result_payload(exchange, parse_headers(exchange.raw_headers))

    assert payload["http_header"][0] == "HTTP/1.1 X"
    assert json.loads(json.dumps(payload))["http_header"]["0"] == "HTTP/1.1 X"
