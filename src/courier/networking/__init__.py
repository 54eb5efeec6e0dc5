"""HTTP networking layer: request building, transport and classification."""

from .classifier import LastError, Outcome, ResponseClassifier
from .client import ExchangeResult, HttpClient
from .config import HttpClientConfig, HttpVersion
from .errors import (
    ConnectionFailedError,
    HttpClientError,
    InvalidHeaderNameError,
    InvalidMethodError,
    RequestTimeoutError,
    TlsError,
    TransportError,
)
from .headers import STATUS_LINE, HeaderMap, parse_headers
from .logger import Logger, LoggingAdapter
from .request import FormBody, JsonBody, Method, RawBody, RequestBuilder
from .transport import RawExchange, Transport

__all__ = [
    "ConnectionFailedError",
    "ExchangeResult",
    "FormBody",
    "HeaderMap",
    "HttpClient",
    "HttpClientConfig",
    "HttpClientError",
    "HttpVersion",
    "InvalidHeaderNameError",
    "InvalidMethodError",
    "JsonBody",
    "LastError",
    "Logger",
    "LoggingAdapter",
    "Method",
    "Outcome",
    "RawBody",
    "RawExchange",
    "RequestBuilder",
    "RequestTimeoutError",
    "ResponseClassifier",
    "STATUS_LINE",
    "TlsError",
    "Transport",
    "TransportError",
    "parse_headers",
]
