# -*- coding: utf-8 -*-
"""Client — API error taxonomy."""

from __future__ import annotations


class APIError(Exception):
    """Base class for every failure raised by :class:`ifast.client.api_client.APIClient`."""


class InvalidURLError(APIError):
    """Base URL, path and query could not be composed into an http(s) URL."""


class HTTPStatusError(APIError):
    """Non-2xx response other than 401."""

    def __init__(self, status_code: int, message: str | None = None) -> None:
        self.status_code = status_code
        super().__init__(message or f"HTTP {status_code}")


class DecodingError(APIError):
    """2xx response whose body does not match the expected shape."""


class NetworkError(APIError):
    """Transport-level failure (DNS, TLS, connect, timeout)."""


class UnauthorizedError(APIError):
    """401 response."""
