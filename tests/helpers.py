# pyright: reportUnknownParameterType=false, reportMissingParameterType=false
"""Shared test doubles."""

from unittest.mock import Mock

from urllib3 import HTTPHeaderDict


class RecordingLogger:
    """Logger stub that keeps every (level, message) pair it receives."""

    def __init__(self):
        self.records = []

    def messages(self, level):
        return [message for lvl, message in self.records if lvl == level]

    def debug(self, message):
        self.records.append(("debug", message))

    def info(self, message):
        self.records.append(("info", message))

    def warn(self, message):
        self.records.append(("warn", message))

    def deprecated(self, message):
        self.records.append(("deprecated", message))

    def error(self, message):
        self.records.append(("error", message))

    def fatal(self, message):
        self.records.append(("fatal", message))

    def security(self, message):
        self.records.append(("security", message))


def mock_response(
    *,
    content: bytes = b"",
    status: int = 200,
    url: str = "http://example.com",
    reason: str = "OK",
    headers=None,
    history=None,
):
    """Build a requests-like response; ``headers`` may repeat names."""
    pairs = (
        list(headers.items())
        if isinstance(headers, dict)
        else list(headers or [("Content-Type", "application/json")])
    )
    raw_headers = HTTPHeaderDict()
    for name, value in pairs:
        raw_headers.add(name, value)

    response = Mock()
    response.content = content
    response.status_code = status
    response.url = url
    response.reason = reason
    response.elapsed.total_seconds.return_value = 0.1
    response.headers = dict(pairs)
    response.raw.headers = raw_headers
    response.raw.version = 11
    response.history = list(history or [])
    return response
