"""Error types for the courier networking layer.

Only the argument errors are ever raised out of ``HttpClient.send_request``.
Transport errors name the failure recorded on a status-0 exchange; client and
server HTTP errors are outcomes, not exceptions.
"""

from __future__ import annotations


class HttpClientError(Exception):
    """Base class for all courier networking errors."""


class InvalidMethodError(HttpClientError, ValueError):
    """Raised when an HTTP method outside the supported set is requested."""


class InvalidHeaderNameError(HttpClientError, ValueError):
    """Raised when a header name is not a valid HTTP token."""


class TransportError(HttpClientError):
    """No HTTP response was obtained."""


class RequestTimeoutError(TransportError):
    """The connect or read phase timed out."""


class ConnectionFailedError(TransportError):
    """DNS resolution or the TCP connection failed."""


class TlsError(ConnectionFailedError):
    """The TLS handshake or certificate verification failed."""
