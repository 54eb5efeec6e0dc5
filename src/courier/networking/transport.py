"""Single HTTP exchange over ``requests``.

One session per call; nothing is pooled or reused between calls. HTTP error
statuses are ordinary exchanges here. Only a failure to obtain any response
produces a status code of 0.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pprint import pformat
from time import monotonic
from typing import Any, Callable

import requests

from .config import HttpClientConfig, HttpVersion
from .errors import (
    ConnectionFailedError,
    RequestTimeoutError,
    TlsError,
    TransportError,
)
from .logger import BANNER, Logger
from .request import Method, OutgoingRequest
from .types import Err, Ok, Result

logger = logging.getLogger(__name__)

# urllib3 reports the protocol version as an integer.
_VERSION_LABELS = {9: "HTTP/0.9", 10: "HTTP/1.0", 11: "HTTP/1.1", 20: "HTTP/2"}


@dataclass(frozen=True)
class RawExchange:
    """What the transport saw: status, raw header block, body, diagnostics."""

    status_code: int
    raw_headers: bytes = b""
    body: bytes = b""
    info: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.status_code == 0


def _header_pairs(response: requests.Response) -> list[tuple[str, str]]:
    """Return response header pairs, keeping repeated names separate."""
    raw_headers = getattr(getattr(response, "raw", None), "headers", None)
    getlist = getattr(raw_headers, "getlist", None)
    if raw_headers is not None and callable(getlist):
        return [
            (name, value) for name in raw_headers for value in getlist(name)
        ]
    return list(response.headers.items())


def _version_label(response: requests.Response) -> str:
    version = getattr(getattr(response, "raw", None), "version", None)
    if isinstance(version, int):
        return _VERSION_LABELS.get(version, "HTTP/1.1")
    return "HTTP/1.1"


def header_block(response: requests.Response) -> bytes:
    """Rebuild the raw header block of one response, status line first."""
    status_line = f"{_version_label(response)} {response.status_code}"
    if response.reason:
        status_line += f" {response.reason}"
    lines = [status_line]
    lines.extend(f"{name}: {value}" for name, value in _header_pairs(response))
    text = "\r\n".join(lines) + "\r\n\r\n"
    return text.encode("iso-8859-1", errors="replace")


def _has_body(body: Any) -> bool:
    """Return True for a body worth attaching; ``"0"`` counts as empty."""
    return bool(body) and body not in ("0", b"0")


def _transport_error(
    exc: requests.exceptions.RequestException,
) -> TransportError:
    """Map a requests exception onto the transport error taxonomy."""
    if isinstance(exc, requests.exceptions.Timeout):
        return RequestTimeoutError(str(exc))
    if isinstance(exc, requests.exceptions.SSLError):
        return TlsError(str(exc))
    if isinstance(exc, requests.exceptions.ConnectionError):
        return ConnectionFailedError(str(exc))
    return TransportError(str(exc))


class Transport:
    """Executes one :class:`OutgoingRequest` according to the config."""

    def __init__(self, config: HttpClientConfig, log: Logger) -> None:
        self._config = config
        self._log = log

    def _get_timeout(self) -> tuple[float, float] | None:
        if not self._config.timeout_enabled:
            return None
        return (
            self._config.connect_timeout_seconds,
            float(self._config.timeout_seconds),
        )

    def _check_http_version(self) -> None:
        unsupported = (HttpVersion.HTTP1_0, HttpVersion.HTTP2)
        if self._config.http_version in unsupported:
            logger.warning(
                "http_version %s cannot be selected with requests; "
                "negotiating HTTP/1.1",
                self._config.http_version.name,
            )

    def _request_fn(
        self, session: requests.Session, request: OutgoingRequest
    ) -> Callable[[], requests.Response]:
        """Pick the session call for the method and attach the body."""
        kwargs: dict[str, Any] = {
            "headers": request.headers,
            "timeout": self._get_timeout(),
            "allow_redirects": self._config.follow_redirects,
            "verify": self._config.use_ssl,
        }
        if request.method.carries_body and _has_body(request.body):
            if request.is_multipart and isinstance(request.body, list):
                kwargs["files"] = [
                    (name, (None, str(value))) for name, value in request.body
                ]
                # requests writes its own multipart header with the boundary.
                kwargs["headers"] = {
                    name: value
                    for name, value in request.headers.items()
                    if name.lower() != "content-type"
                }
            else:
                kwargs["data"] = request.body

        url = request.url
        if request.method is Method.POST:
            return lambda: session.post(url, **kwargs)
        if request.method is Method.HEAD:
            return lambda: session.head(url, **kwargs)
        if request.method is Method.GET:
            return lambda: session.get(url, **kwargs)
        return lambda: session.request(request.method.value, url, **kwargs)

    def _build_info(
        self,
        request: OutgoingRequest,
        response: requests.Response | None,
        started: float,
        header_size: int = 0,
        final_error: str | None = None,
    ) -> dict[str, Any]:
        """Collect the diagnostics bag for one exchange."""
        info: dict[str, Any] = {
            "url": request.url,
            "http_code": 0,
            "method": request.method.value,
            "content_type": None,
            "header_size": header_size,
            "redirect_count": 0,
            "total_time": round(monotonic() - started, 6),
            "request_header": list(request.header_lines),
            "http_version": None,
        }
        if response is not None:
            info["url"] = response.url
            info["http_code"] = response.status_code
            info["content_type"] = response.headers.get("Content-Type")
            info["redirect_count"] = len(response.history or [])
            info["http_version"] = _version_label(response)
            try:
                info["elapsed_s"] = response.elapsed.total_seconds()
            except AttributeError:
                pass
        if final_error is not None:
            info["error_type"] = final_error
        return info

    def _send(
        self, request: OutgoingRequest
    ) -> Result[requests.Response, TransportError]:
        with requests.Session() as session:
            if self._config.user_agent:
                session.headers["User-Agent"] = self._config.user_agent
            request_fn = self._request_fn(session, request)
            try:
                return Ok(request_fn())
            except requests.exceptions.RequestException as exc:
                error = _transport_error(exc)
                return Err(error, meta={"final_error": type(error).__name__})

    def exchange(self, request: OutgoingRequest) -> RawExchange:
        """Perform the call and capture status, headers, body and info."""
        self._check_http_version()
        if self._config.debug:
            self._log.info(
                "\n".join(
                    [
                        f"{BANNER} [INFO] URL: {request.url}",
                        f"{BANNER} [INFO] HTTP Headers ~BEGIN~ {BANNER}",
                        "\n".join(request.header_lines),
                        f"{BANNER} [INFO] HTTP Headers ~END~ {BANNER}",
                        f"{BANNER} [INFO] HTTP Request body ~BEGIN~ "
                        f"{BANNER}",
                        "" if request.body is None else str(request.body),
                        f"{BANNER} [INFO] HTTP Request body ~END~ {BANNER}",
                    ]
                )
            )

        started = monotonic()
        result = self._send(request)

        if not result.ok:
            raw = RawExchange(
                status_code=0,
                info=self._build_info(
                    request,
                    None,
                    started,
                    final_error=result.meta["final_error"],
                ),
                error=str(result.error) or None,
            )
            logger.debug(
                "%s %s failed: %s",
                request.method.value,
                request.url,
                raw.error,
            )
        else:
            response = result.value
            chain = [*(response.history or []), response]
            raw_headers = b"".join(header_block(hop) for hop in chain)
            body = b""
            if request.method is not Method.HEAD:
                body = response.content or b""
            raw = RawExchange(
                status_code=response.status_code,
                raw_headers=raw_headers,
                body=body,
                info=self._build_info(
                    request, response, started, header_size=len(raw_headers)
                ),
            )

        if self._config.debug:
            self._log.info(
                "\n".join(
                    [
                        f"{BANNER} [INFO] URL: {request.url}",
                        f"{BANNER} [INFO] HTTP Response ~BEGIN~ {BANNER}",
                        (raw.raw_headers + raw.body).decode(
                            "utf-8", errors="replace"
                        ),
                        f"{BANNER} [INFO] HTTP Response ~END~ {BANNER}",
                        f"{BANNER} [INFO] HTTP Response Info ~BEGIN~ "
                        f"{BANNER}",
                        pformat(raw.info, sort_dicts=False),
                        f"{BANNER} [INFO] HTTP Response Info ~END~ {BANNER}",
                    ]
                )
            )
        return raw
