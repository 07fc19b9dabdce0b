"""
Tests for the network backend components.
"""

import asyncio
import pytest
import pytest_asyncio

from c_http_easy.client import Client, concat_handler
from c_http_easy.network import (
    AsyncioNetworkBackend,
    AsyncioNetworkStream,
    MockNetworkBackend,
    MockNetworkStream,
    NetworkBackend,
    NetworkStream,
    format_host_header,
    validate_port,
)


class TestMockNetworkStream:
    """Test MockNetworkStream functionality."""

    @pytest.mark.asyncio
    async def test_read_write_basic(self):
        stream = MockNetworkStream()

        await stream.write(b"Hello, World!")
        assert stream.written_data == b"Hello, World!"

        stream.add_data(b"Response data")
        assert await stream.read() == b"Response data"

    @pytest.mark.asyncio
    async def test_read_empty_stream(self):
        stream = MockNetworkStream()
        assert await stream.read() == b""

    @pytest.mark.asyncio
    async def test_read_max_bytes(self):
        stream = MockNetworkStream(b"Hello, World!")

        assert await stream.read(5) == b"Hello"
        assert await stream.read(5) == b", Wor"
        assert await stream.read(5) == b"ld!"
        assert await stream.read(5) == b""

    @pytest.mark.asyncio
    async def test_write_multiple_chunks(self):
        stream = MockNetworkStream()

        await stream.write(b"Hello")
        await stream.write(b", ")
        await stream.write(b"World!")

        assert stream.written_data == b"Hello, World!"

    @pytest.mark.asyncio
    async def test_close(self):
        stream = MockNetworkStream()
        assert not stream.is_closed

        await stream.aclose()
        await stream.aclose()

        assert stream.is_closed
        assert stream.close_calls == 2

    @pytest.mark.asyncio
    async def test_read_after_close(self):
        stream = MockNetworkStream(b"test data")
        await stream.aclose()

        with pytest.raises(RuntimeError, match="Stream is closed"):
            await stream.read()

    @pytest.mark.asyncio
    async def test_write_after_close(self):
        stream = MockNetworkStream()
        await stream.aclose()

        with pytest.raises(RuntimeError, match="Stream is closed"):
            await stream.write(b"test data")

    def test_get_extra_info(self):
        stream = MockNetworkStream()
        stream.set_extra_info("peername", ("127.0.0.1", 8080))

        assert stream.get_extra_info("peername") == ("127.0.0.1", 8080)
        assert stream.get_extra_info("nonexistent") is None


class TestMockNetworkBackend:
    """Test MockNetworkBackend functionality."""

    @pytest.mark.asyncio
    async def test_connect_tcp_basic(self):
        backend = MockNetworkBackend()
        stream = await backend.connect_tcp("example.com", 80)

        assert isinstance(stream, MockNetworkStream)
        assert stream.get_extra_info("peername") == ("example.com", 80)
        assert backend.last_stream is stream

    @pytest.mark.asyncio
    async def test_each_connect_is_fresh(self):
        backend = MockNetworkBackend()
        backend.queue_response("example.com", 80, b"data")

        stream1 = await backend.connect_tcp("example.com", 80)
        stream2 = await backend.connect_tcp("example.com", 80)

        assert stream1 is not stream2
        assert await stream1.read() == b"data"
        assert await stream2.read() == b"data"
        assert backend.get_connection("example.com", 80) is stream2

    @pytest.mark.asyncio
    async def test_connect_tcp_different_hosts(self):
        backend = MockNetworkBackend()
        backend.queue_response("a.example", 80, b"a")

        stream_a = await backend.connect_tcp("a.example", 80)
        stream_b = await backend.connect_tcp("b.example", 8080)

        assert await stream_a.read() == b"a"
        assert await stream_b.read() == b""
        assert [(host, port) for host, port, _ in backend.connections] == [
            ("a.example", 80),
            ("b.example", 8080),
        ]

    @pytest.mark.asyncio
    async def test_connect_error(self):
        backend = MockNetworkBackend(connect_error=ConnectionRefusedError("refused"))

        with pytest.raises(ConnectionRefusedError):
            await backend.connect_tcp("example.com", 80)
        assert backend.connections == []

    def test_get_connection_missing(self):
        backend = MockNetworkBackend()
        assert backend.get_connection("example.com", 80) is None
        assert backend.last_stream is None

    @pytest.mark.asyncio
    async def test_reset(self):
        backend = MockNetworkBackend()
        backend.queue_response("example.com", 80, b"data")
        await backend.connect_tcp("example.com", 80)

        backend.reset()

        assert backend.connections == []
        stream = await backend.connect_tcp("example.com", 80)
        assert await stream.read() == b""


class TestNetworkInterfaces:
    """Test network interface definitions."""

    def test_interfaces_are_abstract(self):
        with pytest.raises(TypeError):
            NetworkStream()
        with pytest.raises(TypeError):
            NetworkBackend()

    def test_implementations(self):
        assert issubclass(MockNetworkStream, NetworkStream)
        assert issubclass(AsyncioNetworkStream, NetworkStream)
        assert issubclass(MockNetworkBackend, NetworkBackend)
        assert issubclass(AsyncioNetworkBackend, NetworkBackend)


class TestNetworkUtils:
    """Test network utilities."""

    @pytest.mark.parametrize("port,expected", [(80, 80), ("8080", 8080), (65535, 65535)])
    def test_validate_port(self, port, expected):
        assert validate_port(port) == expected

    @pytest.mark.parametrize("port", ["abc", "", "-1", 0, 65536])
    def test_validate_port_invalid(self, port):
        with pytest.raises(ValueError):
            validate_port(port)

    def test_format_host_header(self):
        assert format_host_header("example.com", 80) == "example.com"
        assert format_host_header("example.com", 8080) == "example.com:8080"
        assert format_host_header("::1", 80) == "[::1]"
        assert format_host_header("::1", 8080) == "[::1]:8080"
        assert format_host_header("example.com", 443, default_port=443) == "example.com"


@pytest_asyncio.fixture
async def echo_server():
    """Local HTTP server that answers with the request head it received."""
    received = []

    async def handle(reader, writer):
        try:
            head = await reader.readuntil(b"\r\n\r\n")
        except asyncio.IncompleteReadError:
            writer.close()
            return
        received.append(head)
        writer.write(
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Length: %d\r\n"
            b"Connection: close\r\n"
            b"\r\n" % len(head) + head
        )
        await writer.drain()
        writer.close()

    server = await asyncio.start_server(handle, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    yield port, received
    server.close()
    await server.wait_closed()


class TestAsyncioNetworkBackend:
    """Test the asyncio backend against a local server."""

    @pytest.mark.asyncio
    async def test_connect_and_exchange(self, echo_server):
        port, received = echo_server
        backend = AsyncioNetworkBackend()

        stream = await backend.connect_tcp("127.0.0.1", port, timeout=5.0)
        try:
            assert stream.get_extra_info("peername")[1] == port
            await stream.write(b"GET / HTTP/1.1\r\nHost: x\r\n\r\n")

            data = b""
            while True:
                chunk = await stream.read()
                if not chunk:
                    break
                data += chunk
        finally:
            await stream.aclose()

        assert stream.is_closed
        assert data.startswith(b"HTTP/1.1 200 OK\r\n")
        assert received == [b"GET / HTTP/1.1\r\nHost: x\r\n\r\n"]

    @pytest.mark.asyncio
    async def test_closed_stream(self, echo_server):
        port, _ = echo_server
        stream = await AsyncioNetworkBackend().connect_tcp("127.0.0.1", port)
        await stream.aclose()
        await stream.aclose()

        with pytest.raises(RuntimeError, match="Stream is closed"):
            await stream.read()
        with pytest.raises(RuntimeError, match="Stream is closed"):
            await stream.write(b"data")

    @pytest.mark.asyncio
    async def test_connection_refused(self):
        server = await asyncio.start_server(lambda r, w: None, "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        server.close()
        await server.wait_closed()

        with pytest.raises(OSError):
            await AsyncioNetworkBackend().connect_tcp("127.0.0.1", port, timeout=5.0)

    @pytest.mark.asyncio
    async def test_client_get_end_to_end(self, echo_server):
        port, received = echo_server

        body = await Client().get(f"http://127.0.0.1:{port}/hello?x=1", concat_handler)

        assert body.startswith(b"GET /hello?x=1 HTTP/1.1\r\n")
        assert f"Host: 127.0.0.1:{port}".encode() in body
        assert b"Accept: */*" in body
        assert received == [body]
