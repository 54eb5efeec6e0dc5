"""Outgoing request construction: method, headers, query and body encoding."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping, Sequence, Union
from urllib.parse import urlencode

from .errors import InvalidHeaderNameError, InvalidMethodError

logger = logging.getLogger(__name__)

FORM_URLENCODED_LINE = "Content-Type: application/x-www-form-urlencoded"
MULTIPART_LINE = "Content-Type: multipart/form-data"

_TOKEN = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


class Method(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"

    @classmethod
    def parse(cls, value: Any) -> Method:
        """Return the method for ``value``, matched case-insensitively."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.upper())
            except ValueError:
                pass
        shown = value.upper() if isinstance(value, str) else value
        valid = ", ".join(member.value for member in cls)
        raise InvalidMethodError(
            f"invalid HTTP method [{shown}]; valid options are [{valid}]"
        )

    @property
    def carries_body(self) -> bool:
        return self not in (Method.GET, Method.HEAD)


def validate_header_name(name: Any) -> str:
    """Return ``name`` if it is a valid header field name, else raise."""
    if not isinstance(name, str):
        raise InvalidHeaderNameError("header name must be a string")
    if not _TOKEN.match(name):
        raise InvalidHeaderNameError(f"invalid header name: {name!r}")
    return name


@dataclass(frozen=True)
class RawBody:
    """Body that is already encoded and is sent untouched."""

    data: bytes | str

    def __bool__(self) -> bool:
        return bool(self.data)


@dataclass(frozen=True)
class FormBody:
    """Form fields as a mapping or a sequence of ``(key, value)`` pairs."""

    pairs: Mapping[str, Any] | Sequence[tuple[str, Any]]

    def __bool__(self) -> bool:
        return bool(self.pairs)


@dataclass(frozen=True)
class JsonBody:
    """Structured value to be serialized before sending."""

    value: Any

    def __bool__(self) -> bool:
        return bool(self.value)


Body = Union[RawBody, FormBody, JsonBody]


def coerce_body(value: Any) -> Body | None:
    """Wrap a loosely typed caller body in its body variant."""
    if value is None:
        return None
    if isinstance(value, (RawBody, FormBody, JsonBody)):
        return value
    if isinstance(value, (str, bytes, bytearray)):
        return RawBody(bytes(value) if isinstance(value, bytearray) else value)
    return JsonBody(value)


def _form_scalar(value: Any) -> Any:
    if isinstance(value, bool):
        return "1" if value else "0"
    return value


def _flatten(value: Any, name: str, flat: list[tuple[str, Any]]) -> None:
    if isinstance(value, Mapping):
        items: Iterable[tuple[Any, Any]] = value.items()
    elif isinstance(value, (list, tuple)):
        items = enumerate(value)
    else:
        flat.append((name, _form_scalar(value)))
        return
    for key, item in items:
        if item is not None:
            _flatten(item, f"{name}[{key}]", flat)


def form_fields(value: Any) -> list[tuple[str, Any]]:
    """Flatten a structured value into form fields.

    Mapping keys and list indexes both become bracketed segments, so
    ``{"user": {"tags": ["a"]}}`` yields ``user[tags][0]`` and ``["a", "b"]``
    yields ``0`` and ``1``. ``None`` members are skipped and booleans become
    ``1``/``0``.
    """
    if isinstance(value, Mapping):
        items: Iterable[tuple[Any, Any]] = value.items()
    elif isinstance(value, (list, tuple)):
        items = enumerate(value)
    else:
        raise TypeError(
            "form and multipart bodies must be a mapping or a sequence, "
            f"not {type(value).__name__}"
        )
    flat: list[tuple[str, Any]] = []
    for key, item in items:
        if item is not None:
            _flatten(item, str(key), flat)
    return flat


def pair_fields(
    pairs: Mapping[str, Any] | Sequence[tuple[str, Any]],
) -> list[tuple[str, Any]]:
    """Flatten explicit ``(key, value)`` pairs; keys may repeat."""
    items = list(pairs.items()) if isinstance(pairs, Mapping) else list(pairs)
    flat: list[tuple[str, Any]] = []
    for pair in items:
        if not isinstance(pair, (list, tuple)) or len(pair) != 2:
            raise TypeError(f"form pairs must be (key, value), not {pair!r}")
        key, item = pair
        if item is not None:
            _flatten(item, str(key), flat)
    return flat


def append_query(url: str, query_params: Mapping[str, Any] | None) -> str:
    """Append url-encoded ``query_params`` to ``url``.

    A URL that already carries a query string is extended with ``&`` rather
    than given a second ``?``.
    """
    if not query_params:
        return url
    query = urlencode(query_params, doseq=True)
    if "?" not in url:
        return f"{url}?{query}"
    if url.endswith(("?", "&")):
        return f"{url}{query}"
    return f"{url}&{query}"


@dataclass(frozen=True)
class OutgoingRequest:
    method: Method
    url: str
    headers: dict[str, str]
    header_lines: list[str]
    body: Any = None

    @property
    def is_multipart(self) -> bool:
        return MULTIPART_LINE in self.header_lines


class RequestBuilder:
    """Builds an :class:`OutgoingRequest` from caller input and defaults."""

    def __init__(
        self, default_headers: Mapping[str, str] | None = None
    ) -> None:
        self._default_headers = (
            default_headers if default_headers is not None else {}
        )

    def merge_headers(
        self, headers: Mapping[str, Any] | None
    ) -> dict[str, str]:
        """Overlay call headers on the defaults; call headers win by key."""
        merged = {
            name: str(value) for name, value in self._default_headers.items()
        }
        for name, value in (headers or {}).items():
            merged[name] = str(value)
        return merged

    @staticmethod
    def _fields(body: FormBody | JsonBody) -> list[tuple[str, Any]]:
        if isinstance(body, FormBody):
            return pair_fields(body.pairs)
        return form_fields(body.value)

    @classmethod
    def encode_body(
        cls, body: Body | None, header_lines: Sequence[str]
    ) -> Any:
        """Apply the body encoding policy.

        1. Form content type and a non-empty body: url-encode structured
           bodies.
        2. Structured body and not multipart: JSON for ``JsonBody``, form
           encoding for ``FormBody``.
        3. Anything else goes through as is; structured multipart bodies are
           flattened to ``(name, value)`` fields.

        Raises:
            TypeError: a scalar body is sent as form or multipart fields.
        """
        if body is None:
            return None
        if isinstance(body, RawBody):
            return body.data
        if body and FORM_URLENCODED_LINE in header_lines:
            return urlencode(cls._fields(body))
        if MULTIPART_LINE not in header_lines:
            if isinstance(body, FormBody):
                return urlencode(cls._fields(body))
            return json.dumps(body.value, separators=(",", ":"), default=str)
        return cls._fields(body)

    def build(
        self,
        method: Any,
        url: str,
        query_params: Mapping[str, Any] | None = None,
        body: Any = None,
        headers: Mapping[str, Any] | None = None,
    ) -> OutgoingRequest:
        resolved = Method.parse(method)
        if query_params is not None and not isinstance(query_params, Mapping):
            raise TypeError("query_params must be a mapping")
        if headers is not None and not isinstance(headers, Mapping):
            raise TypeError("headers must be a mapping")

        merged = self.merge_headers(headers)
        header_lines = [f"{name}: {value}" for name, value in merged.items()]
        encoded = self.encode_body(coerce_body(body), header_lines)
        target = append_query(url, query_params)

        logger.debug("built %s request for %s", resolved.value, target)
        return OutgoingRequest(
            method=resolved,
            url=target,
            headers=merged,
            header_lines=header_lines,
            body=encoded,
        )
