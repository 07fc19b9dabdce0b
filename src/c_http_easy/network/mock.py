"""
Mock network implementations for testing.

This module provides mock implementations of NetworkStream and NetworkBackend
that can be used for unit testing without requiring actual network connections.
"""

from typing import Any, Dict, List, Optional, Tuple

from .backend import NetworkBackend
from .stream import NetworkStream


class MockNetworkStream(NetworkStream):
    """
    Mock network stream for testing.

    Reads are served from a preloaded buffer and writes are recorded,
    so tests can check exactly what went over the wire.
    """

    def __init__(self, data: bytes = b""):
        """
        Initialize the mock stream.

        Args:
            data: Initial data to be available for reading.
        """
        self._data = data
        self._position = 0
        self._closed = False
        self._close_calls = 0
        self._extra_info: Dict[str, Any] = {}
        self._write_buffer: List[bytes] = []

    async def read(self, max_bytes: Optional[int] = None) -> bytes:
        if self._closed:
            raise RuntimeError("Stream is closed")

        if self._position >= len(self._data):
            return b""

        if max_bytes is None:
            end = len(self._data)
        else:
            end = min(self._position + max_bytes, len(self._data))

        result = self._data[self._position:end]
        self._position = end
        return result

    async def write(self, data: bytes) -> None:
        if self._closed:
            raise RuntimeError("Stream is closed")

        self._write_buffer.append(data)

    async def aclose(self) -> None:
        self._close_calls += 1
        self._closed = True

    def get_extra_info(self, name: str) -> Optional[Any]:
        return self._extra_info.get(name)

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def close_calls(self) -> int:
        """Number of times aclose() was called."""
        return self._close_calls

    @property
    def written_data(self) -> bytes:
        """Get all data that was written to the stream."""
        return b"".join(self._write_buffer)

    def set_extra_info(self, name: str, value: Any) -> None:
        self._extra_info[name] = value

    def add_data(self, data: bytes) -> None:
        """
        Add data to be available for reading.

        Args:
            data: The data to add.
        """
        self._data += data


class MockNetworkBackend(NetworkBackend):
    """
    Mock network backend for testing.

    Every connect_tcp call creates a new MockNetworkStream preloaded with
    the response queued for that host and port. Connections are recorded
    in the order they were opened.
    """

    def __init__(self, connect_error: Optional[Exception] = None):
        """
        Initialize the mock backend.

        Args:
            connect_error: If given, raised by every connect_tcp call.
        """
        self._responses: Dict[Tuple[str, int], bytes] = {}
        self._connect_error = connect_error
        self.connections: List[Tuple[str, int, MockNetworkStream]] = []

    def queue_response(self, host: str, port: int, data: bytes) -> None:
        """
        Set the bytes the next connections to host:port will read.

        Args:
            host: The hostname.
            port: The port number.
            data: Raw HTTP response bytes.
        """
        self._responses[(host, port)] = data

    async def connect_tcp(
        self,
        host: str,
        port: int,
        timeout: Optional[float] = None
    ) -> MockNetworkStream:
        if self._connect_error is not None:
            raise self._connect_error

        stream = MockNetworkStream(self._responses.get((host, port), b""))
        stream.set_extra_info("peername", (host, port))
        stream.set_extra_info("sockname", ("127.0.0.1", 12345))
        self.connections.append((host, port, stream))
        return stream

    def get_connection(self, host: str, port: int) -> Optional[MockNetworkStream]:
        """
        Get the most recent mock connection to host:port.

        Args:
            host: The hostname.
            port: The port number.

        Returns:
            The mock stream if one was opened, None otherwise.
        """
        for conn_host, conn_port, stream in reversed(self.connections):
            if (conn_host, conn_port) == (host, port):
                return stream
        return None

    @property
    def last_stream(self) -> Optional[MockNetworkStream]:
        if not self.connections:
            return None
        return self.connections[-1][2]

    def reset(self) -> None:
        """Forget queued responses and recorded connections."""
        self._responses.clear()
        self.connections.clear()
