"""courier: a configurable synchronous HTTP request client."""

from .networking.client import ExchangeResult, HttpClient
from .networking.config import HttpClientConfig, HttpVersion

__all__ = ["ExchangeResult", "HttpClient", "HttpClientConfig", "HttpVersion"]
