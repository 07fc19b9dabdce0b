"""
Pytest configuration for c_http_easy tests.

This file contains shared fixtures and configuration
for all tests in the project.
"""

import pytest
from typing import List, Optional, Tuple

from c_http_easy.client import Client
from c_http_easy.network.mock import MockNetworkBackend


def build_response(
    status: int = 200,
    body: bytes = b"",
    headers: Optional[List[Tuple[bytes, bytes]]] = None,
    reason: bytes = b"OK",
) -> bytes:
    """Build raw HTTP/1.1 response bytes with a Content-Length."""
    if headers is None:
        headers = [(b"Content-Length", str(len(body)).encode())]
    head = b"HTTP/1.1 %d %s\r\n" % (status, reason)
    for name, value in headers:
        head += name + b": " + value + b"\r\n"
    return head + b"\r\n" + body


def split_request(data: bytes) -> Tuple[bytes, List[bytes], bytes]:
    """Split raw request bytes into request line, lower-cased header lines and body."""
    head, _, body = data.partition(b"\r\n\r\n")
    lines = head.split(b"\r\n")
    return lines[0], [line.lower() for line in lines[1:]], body


@pytest.fixture
def backend():
    """Create a mock network backend."""
    return MockNetworkBackend()


@pytest.fixture
def client(backend):
    """Create a client using the mock backend."""
    return Client(backend=backend)


@pytest.fixture
def sample_stream_data():
    """Sample stream data for testing."""
    return [
        b"Hello",
        b", ",
        b"World",
        b"!",
    ]


@pytest.fixture
def status_and_body_handler():
    """Handler returning (status_code, body)."""
    async def handler(response, stream):
        return response.status_code, await stream.aread()
    return handler


@pytest.fixture
def http_response():
    """Factory for raw HTTP/1.1 response bytes."""
    return build_response


@pytest.fixture
def parse_request():
    """Splitter for raw request bytes written by the client."""
    return split_request
