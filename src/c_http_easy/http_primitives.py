"""
HTTP primitives for c_http_easy.

This module defines the core data structures for HTTP requests and responses.
All classes are immutable to ensure thread safety and simplify reasoning.
"""

from dataclasses import dataclass, field
from typing import (
    AsyncIterable,
    List,
    Optional,
    Tuple,
    Union,
)


# Type aliases for better readability
Headers = List[Tuple[bytes, bytes]]
StatusCode = int


def _to_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, str):
        return value.encode("latin-1")
    return value


def _validate_headers(headers: Headers) -> None:
    if not isinstance(headers, list):
        raise ValueError("headers must be a list")

    for name, value in headers:
        if not isinstance(name, bytes) or not isinstance(value, bytes):
            raise ValueError("header names and values must be bytes")


def _find_header(headers: Headers, name: Union[str, bytes]) -> Optional[bytes]:
    name_lower = _to_bytes(name).lower()
    for header_name, header_value in headers:
        if header_name.lower() == name_lower:
            return header_value
    return None


@dataclass(frozen=True)
class Request:
    """
    Immutable HTTP request representation.

    ``target`` is the request-target sent on the request line: the path
    plus any query and fragment. The body, if any, is sent separately
    by the connection.
    """

    method: bytes
    target: bytes
    headers: Headers = field(default_factory=list)

    def __post_init__(self) -> None:
        if not isinstance(self.method, bytes):
            raise ValueError("method must be bytes")

        if not isinstance(self.target, bytes) or not self.target:
            raise ValueError("target must be non-empty bytes")

        _validate_headers(self.headers)

    @classmethod
    def create(
        cls,
        method: Union[str, bytes],
        target: Union[str, bytes],
        headers: Optional[List[Tuple[Union[str, bytes], Union[str, bytes]]]] = None,
    ) -> "Request":
        """
        Create a Request with proper type conversion.

        Args:
            method: HTTP method (GET, POST, etc.)
            target: Request target, e.g. ``/search?q=x``
            headers: Optional list of (name, value) header tuples

        Returns:
            New Request instance
        """
        converted = [(_to_bytes(n), _to_bytes(v)) for n, v in headers or []]
        return cls(method=_to_bytes(method), target=_to_bytes(target), headers=converted)

    def add_header(self, name: Union[str, bytes], value: Union[str, bytes]) -> "Request":
        """Return a copy of the request with one more header."""
        new_headers = self.headers + [(_to_bytes(name), _to_bytes(value))]
        return Request(method=self.method, target=self.target, headers=new_headers)

    def get_header(self, name: Union[str, bytes]) -> Optional[bytes]:
        """Get a header value by name (case-insensitive)."""
        return _find_header(self.headers, name)


@dataclass(frozen=True)
class Response:
    """
    Immutable HTTP response representation.

    The status line and headers are fixed once received. The body is
    exposed through ``stream``, which reads from the connection as it
    is consumed.
    """

    status_code: StatusCode
    headers: Headers = field(default_factory=list)
    reason: bytes = b""
    http_version: bytes = b"1.1"
    stream: Optional[AsyncIterable[bytes]] = None

    def __post_init__(self) -> None:
        if not isinstance(self.status_code, int):
            raise ValueError("status_code must be int")

        _validate_headers(self.headers)

    def get_header(self, name: Union[str, bytes]) -> Optional[bytes]:
        """Get a header value by name (case-insensitive)."""
        return _find_header(self.headers, name)

    def has_header(self, name: Union[str, bytes]) -> bool:
        """Check if a header exists (case-insensitive)."""
        return self.get_header(name) is not None
