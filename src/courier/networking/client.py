"""Synchronous HTTP client façade.

``HttpClient.send_request`` builds the request, performs one exchange,
parses the response headers and classifies the outcome. HTTP error statuses
and transport failures are reported through the returned result and the
client's last-error slot; only malformed arguments raise.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Mapping
from urllib.parse import urlsplit

import requests

from .classifier import Classification, LastError, ResponseClassifier
from .config import HttpClientConfig
from .headers import HeaderMap, parse_headers
from .logger import Logger, LoggingAdapter
from .request import Method, RequestBuilder, validate_header_name
from .transport import Transport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExchangeResult:
    """Structured outcome of ``send_request``."""

    http_code: int
    info: dict[str, Any] = field(default_factory=dict)
    http_header: HeaderMap = field(default_factory=HeaderMap)
    http_body: bytes = b""

    @property
    def ok(self) -> bool:
        return 100 <= self.http_code <= 399

    def as_dict(self) -> dict[str, Any]:
        return {
            "http_code": self.http_code,
            "info": self.info,
            "http_header": self.http_header,
            "http_body": self.http_body,
        }


class HttpClient:
    """Configurable HTTP request client.

    Holds the configuration, the default headers sent with every request, and
    the error recorded by the most recent failing call. The last error is
    guarded by a lock, but concurrent calls on one instance still race on it:
    the last writer wins.
    """

    def __init__(
        self,
        config: HttpClientConfig | Mapping[str, Any] | None = None,
        logger: Logger | None = None,
    ) -> None:
        """Create a new HttpClient.

        Args:
            config: An ``HttpClientConfig`` or a legacy option mapping.
            logger: Logger capability for debug dumps and HTTP error reports.
                Defaults to a ``LoggingAdapter`` over the ``courier`` logger.
        """
        if config is None:
            config = HttpClientConfig()
        elif not isinstance(config, HttpClientConfig):
            config = HttpClientConfig.from_options(config)
        self._config = config
        self._log: Logger = logger if logger is not None else LoggingAdapter()
        self._default_headers: dict[str, str] = {}
        self._last_error: LastError | None = None
        self._lock = threading.Lock()
        self._transport = Transport(self._config, self._log)
        self._classifier = ResponseClassifier(self._log)

    @property
    def config(self) -> HttpClientConfig:
        return self._config

    @property
    def last_error(self) -> LastError | None:
        with self._lock:
            return self._last_error

    def get_last_error_num(self) -> int | None:
        error = self.last_error
        return None if error is None else error.code

    def get_last_error_msg(self) -> str | None:
        error = self.last_error
        return None if error is None else error.message

    def clear_last_error(self) -> None:
        with self._lock:
            self._last_error = None

    def add_default_header(self, name: str, value: Any) -> HttpClient:
        """Add a header sent on every request, replacing any with that name.

        A header of the same name passed to ``send_request`` overrides it for
        that call.
        """
        self._default_headers[validate_header_name(name)] = str(value)
        return self

    def get_default_headers(self) -> dict[str, str]:
        return dict(self._default_headers)

    def _record(self, classification: Classification) -> None:
        if classification.last_error is None:
            return
        with self._lock:
            self._last_error = classification.last_error

    def send_request(
        self,
        url: str,
        method: str | Method = Method.GET,
        query_params: Mapping[str, Any] | None = None,
        body: Any = None,
        headers: Mapping[str, Any] | None = None,
    ) -> ExchangeResult:
        """Perform one HTTP call.

        Args:
            url: Absolute URL to request.
            method: HTTP method, matched case-insensitively.
            query_params: Optional query parameters appended to the URL.
            body: Optional payload: ``str``/``bytes`` are sent as is, the
                ``RawBody``/``FormBody``/``JsonBody`` variants explicitly,
                anything else is treated as a structured value.
            headers: Optional per-request headers overriding the defaults.

        Returns:
            ExchangeResult for every obtained status, and with ``http_code``
            0 when no response was obtained.

        Raises:
            InvalidMethodError: ``method`` is not a supported HTTP method.
            TypeError: ``query_params`` or ``headers`` is not a mapping.
        """
        builder = RequestBuilder(self._default_headers)
        request = builder.build(method, url, query_params, body, headers)

        exchange = self._transport.exchange(request)
        header_map = parse_headers(exchange.raw_headers)
        classification = self._classifier.classify(
            exchange, header_map, request.url
        )
        self._record(classification)
        logger.debug(
            "%s %s -> %s (%s)",
            request.method.value,
            request.url,
            exchange.status_code,
            classification.outcome.value,
        )

        return ExchangeResult(
            http_code=exchange.status_code,
            info=exchange.info,
            http_header=header_map,
            http_body=exchange.body,
        )

    @staticmethod
    def check_resource_availability(url: str, timeout: float = 10.0) -> bool:
        """Return True if the URL's origin answers a HEAD request with a 2xx.

        The URL is reduced to ``scheme://host[:port]`` when both a scheme and
        a host can be parsed. Redirects are not followed. Any connection
        failure or non-2xx status yields False.
        """
        if not url:
            return False
        check_url = url
        try:
            parts = urlsplit(url)
            port = parts.port
        except ValueError:
            return False
        if parts.scheme and parts.hostname:
            host = parts.hostname
            if ":" in host:
                host = f"[{host}]"
            check_url = f"{parts.scheme}://{host}"
            if port is not None:
                check_url += f":{port}"

        try:
            response = requests.head(
                check_url, timeout=timeout, allow_redirects=False
            )
        except requests.exceptions.RequestException:
            return False
        return 200 <= response.status_code <= 299
