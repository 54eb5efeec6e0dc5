"""Outcome classification for a completed or failed exchange."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pprint import pformat
from typing import Any

from .headers import HeaderMap
from .logger import BANNER, Logger
from .transport import RawExchange


class Outcome(Enum):
    SUCCESS = "success"
    TRANSPORT_FAILURE = "transport_failure"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"


@dataclass(frozen=True)
class LastError:
    """Error code and message recorded by the most recent failing call."""

    code: int
    message: str


@dataclass(frozen=True)
class Classification:
    outcome: Outcome
    last_error: LastError | None = None


def result_payload(
    exchange: RawExchange, headers: HeaderMap
) -> dict[str, Any]:
    """Return the full call result in its JSON-friendly form."""
    return {
        "http_code": exchange.status_code,
        "info": exchange.info,
        "http_header": headers.to_dict(),
        "http_body": exchange.body.decode("utf-8", errors="replace"),
    }


class ResponseClassifier:
    """Decides the outcome of one exchange and logs 4xx/5xx responses.

    Checks run in a fixed order: transport failure first, then server error,
    then client error. Exactly one outcome is produced. A successful outcome
    carries no error, so a success never clears an earlier one.
    """

    def __init__(self, log: Logger) -> None:
        self._log = log

    @staticmethod
    def transport_failure_message(url: str, error: str | None) -> str:
        if error:
            return f"HTTP call to [{url}] failed: [{error}]"
        return (
            f"HTTP call to [{url}] failed, but for an unknown reason. "
            "This could happen if you are disconnected from the network."
        )

    def _report(
        self, label: str, url: str, status: int, payload: dict[str, Any]
    ) -> str:
        return "\n".join(
            [
                f"{BANNER} [{label}] {status} URL: {url}",
                f"{BANNER} [{label}] HTTP Response ~BEGIN~ {BANNER}",
                pformat(payload, width=100, sort_dicts=False),
                f"{BANNER} [{label}] HTTP Response ~END~ {BANNER}",
            ]
        )

    def classify(
        self, exchange: RawExchange, headers: HeaderMap, url: str
    ) -> Classification:
        status = exchange.status_code

        if status == 0:
            message = self.transport_failure_message(url, exchange.error)
            return Classification(
                Outcome.TRANSPORT_FAILURE, LastError(0, message)
            )

        if status >= 500:
            payload = result_payload(exchange, headers)
            self._log.fatal(self._report("FATAL", url, status, payload))
            return Classification(
                Outcome.SERVER_ERROR,
                LastError(status, json.dumps(payload, default=str)),
            )

        if 400 <= status <= 499:
            payload = result_payload(exchange, headers)
            self._log.error(self._report("ERROR", url, status, payload))
            return Classification(
                Outcome.CLIENT_ERROR,
                LastError(status, json.dumps(payload, default=str)),
            )

        return Classification(Outcome.SUCCESS)
