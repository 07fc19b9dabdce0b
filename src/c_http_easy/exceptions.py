"""
Custom exceptions for c_http_easy.

This module defines the exception hierarchy used throughout
the library. Errors raised by the network transport (``OSError``,
``asyncio.TimeoutError``) and by caller-supplied callbacks are
never wrapped and reach the caller unchanged.
"""

from typing import Optional


class HTTPCoreError(Exception):
    """Base exception for all c_http_easy errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class MalformedURLError(HTTPCoreError):
    """Raised when a URL cannot be parsed as an absolute URI."""

    def __init__(self, url: str, reason: Optional[str] = None) -> None:
        message = f"Can't parse URI {url}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.url = url


class UnsupportedSchemeError(HTTPCoreError):
    """Raised when a URL names a scheme no transport is available for."""

    def __init__(self, message: str, scheme: str = "") -> None:
        super().__init__(message)
        self.scheme = scheme


class ConnectionError(HTTPCoreError):
    """Raised when a connection is used in a state that doesn't allow it."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Connection error: {message}", cause)


class ProtocolError(HTTPCoreError):
    """Raised when there's an error with HTTP protocol handling."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Protocol error: {message}", cause)


class StreamError(HTTPCoreError):
    """Raised when there's an error with stream operations."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Stream error: {message}", cause)
