"""Configuration models for the HttpClient interface."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class HttpVersion(Enum):
    """Requested HTTP protocol version.

    Values mirror the libcurl ``CURL_HTTP_VERSION_*`` codes so that legacy
    option dictionaries can pass integers straight through.
    """

    NEGOTIATED = 0
    HTTP1_0 = 1
    HTTP1_1 = 2
    HTTP2 = 3

    @classmethod
    def coerce(cls, value: Any) -> HttpVersion:
        """Return the version for an enum member, curl code, or label."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValueError(f"invalid http_version: {value!r}")
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise ValueError(f"invalid http_version: {value!r}") from None
        if isinstance(value, str):
            label = value.strip().upper().replace("HTTP/", "")
            aliases = {
                "": cls.NEGOTIATED,
                "NEGOTIATED": cls.NEGOTIATED,
                "NONE": cls.NEGOTIATED,
                "1.0": cls.HTTP1_0,
                "1.1": cls.HTTP1_1,
                "2": cls.HTTP2,
                "2.0": cls.HTTP2,
            }
            if label in aliases:
                return aliases[label]
            if label in cls.__members__:
                return cls[label]
        raise ValueError(f"invalid http_version: {value!r}")


# Legacy option key -> dataclass field.
_OPTION_KEYS = {
    "curl_debug": "debug",
    "use_ssl": "use_ssl",
    "curl_follow_location": "follow_redirects",
    "timeout": "timeout_seconds",
    "http_version": "http_version",
    "curl_user_agent": "user_agent",
}


@dataclass(frozen=True)
class HttpClientConfig:
    """Configuration for HttpClient behavior.

    Held by the client for its lifetime and never mutated per call.
    """

    use_ssl: bool = True
    follow_redirects: bool = False
    timeout_seconds: int = 0
    connect_timeout_seconds: float = 1.0
    http_version: HttpVersion = HttpVersion.NEGOTIATED
    user_agent: str | None = None
    debug: bool = False

    def __post_init__(self) -> None:
        if self.timeout_seconds < 0:
            raise ValueError("timeout_seconds must be >= 0")
        if self.connect_timeout_seconds <= 0:
            raise ValueError("connect_timeout_seconds must be > 0")
        if self.user_agent is not None and not isinstance(
            self.user_agent, str
        ):
            raise ValueError("user_agent must be a string when provided")

        object.__setattr__(
            self, "http_version", HttpVersion.coerce(self.http_version)
        )

    @property
    def timeout_enabled(self) -> bool:
        """Return True when a total-call timeout should be enforced."""
        return self.timeout_seconds != 0

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> HttpClientConfig:
        """Build a config from the legacy option dictionary.

        Recognized keys are ``curl_debug``, ``use_ssl``,
        ``curl_follow_location``, ``timeout``, ``http_version`` and
        ``curl_user_agent``. Anything else is ignored.
        """
        kwargs: dict[str, Any] = {}
        for key, field_name in _OPTION_KEYS.items():
            if key in options and options[key] is not None:
                kwargs[field_name] = options[key]
        if "debug" in kwargs:
            kwargs["debug"] = bool(kwargs["debug"])
        if "follow_redirects" in kwargs:
            kwargs["follow_redirects"] = bool(kwargs["follow_redirects"])
        if kwargs.get("user_agent") == "":
            kwargs["user_agent"] = None
        return cls(**kwargs)
