"""
HTTP/1.1 connection implementation for c_http_easy.

This module implements the HTTP11Connection class that carries a single
HTTP/1.1 request/response cycle over a NetworkStream, using h11 for the
wire format.
"""

import asyncio
import inspect
import logging
import time
from enum import Enum
from typing import Any, AsyncIterable, Awaitable, Callable, Dict, List, Optional, Tuple, Union

import h11

from . import __version__
from .http_primitives import Headers, Request, Response
from .network.backend import NetworkBackend
from .network.stream import NetworkStream
from .network.utils import format_host_header
from .streams import ResponseStream
from .exceptions import ConnectionError, ProtocolError

logger = logging.getLogger(__name__)

ResponseHandler = Callable[[Response, ResponseStream], Union[Awaitable[Any], Any]]


class ConnectionState(Enum):
    """States of an HTTP/1.1 connection."""
    NEW = "new"           # Connection opened, no request sent yet
    ACTIVE = "active"     # Request sent, response in progress
    DONE = "done"         # Response body fully received
    CLOSED = "closed"     # Connection closed, cannot be used


class HTTP11Connection:
    """
    HTTP/1.1 connection.

    A connection carries exactly one request: build it, send it with
    its body, then receive the response through a handler. Whoever
    opened the connection must close it.
    """

    # Default configuration
    DEFAULT_READ_TIMEOUT = 30.0  # 30 seconds
    DEFAULT_WRITE_TIMEOUT = 30.0  # 30 seconds
    READ_CHUNK_SIZE = 65536  # 64KB
    USER_AGENT = f"c_http_easy/{__version__}"

    def __init__(
        self,
        stream: NetworkStream,
        host: str,
        port: int,
        read_timeout: Optional[float] = None,
        write_timeout: Optional[float] = None,
    ):
        """
        Initialize HTTP/1.1 connection.

        Args:
            stream: The NetworkStream to use for communication
            host: Host the stream is connected to, used for the Host header
            port: Port the stream is connected to
            read_timeout: Timeout for read operations in seconds
            write_timeout: Timeout for write operations in seconds
        """
        self._stream = stream
        self._host = host
        self._port = port
        self._h11_connection = h11.Connection(h11.CLIENT)
        self._state = ConnectionState.NEW

        # Configuration
        self._read_timeout = read_timeout if read_timeout is not None else self.DEFAULT_READ_TIMEOUT
        self._write_timeout = write_timeout if write_timeout is not None else self.DEFAULT_WRITE_TIMEOUT

        # Metrics
        self._bytes_sent = 0
        self._bytes_received = 0
        self._errors_count = 0
        self._request_line: Optional[str] = None
        self._request_started: Optional[float] = None

        logger.debug(f"HTTP/1.1 connection to {host}:{port} initialized")

    def build_request(
        self,
        method: Union[str, bytes],
        target: Union[str, bytes],
        accept: Optional[Union[str, bytes]] = None,
        content_type: Optional[Union[str, bytes]] = None,
        content_length: Optional[int] = None,
        headers: Optional[List[Tuple[Union[str, bytes], Union[str, bytes]]]] = None,
    ) -> Request:
        """
        Build a request for this connection.

        Host and User-Agent are always set. The keyword arguments are
        shortcuts for the headers of the same name; ``headers`` adds raw
        (name, value) pairs after them.

        Args:
            method: HTTP method
            target: Request target (path, query and fragment)
            accept: Value for the Accept header
            content_type: Value for the Content-Type header
            content_length: Value for the Content-Length header
            headers: Additional (name, value) header pairs

        Returns:
            The request, ready for send_request()
        """
        request = Request.create(
            method=method,
            target=target,
            headers=[
                (b"Host", format_host_header(self._host, self._port)),
                (b"User-Agent", self.USER_AGENT),
            ],
        )
        if accept is not None:
            request = request.add_header(b"Accept", accept)
        if content_type is not None:
            request = request.add_header(b"Content-Type", content_type)
        if content_length is not None:
            request = request.add_header(b"Content-Length", str(content_length))
        for name, value in headers or []:
            request = request.add_header(name, value)
        return request

    async def send_request(
        self,
        request: Request,
        body: Optional[AsyncIterable[bytes]] = None,
    ) -> None:
        """
        Send a request and its body.

        Args:
            request: The request to send
            body: Optional body chunks; their total must match any
                  Content-Length the request declares

        Raises:
            ConnectionError: If the connection is closed or already used
            ProtocolError: If h11 rejects the request or body framing
        """
        if self._state == ConnectionState.CLOSED:
            raise ConnectionError("Connection is closed")
        if self._state != ConnectionState.NEW:
            raise ConnectionError("Connection is busy")

        self._state = ConnectionState.ACTIVE
        self._request_started = time.time()
        self._request_line = f"{request.method.decode('latin-1')} {request.target.decode('latin-1')}"

        try:
            await self._send_event(
                h11.Request(
                    method=request.method,
                    target=request.target,
                    headers=request.headers,
                )
            )

            if body is not None:
                async for chunk in body:
                    await self._send_event(h11.Data(data=chunk))

            await self._send_event(h11.EndOfMessage())

        except h11.LocalProtocolError as e:
            self._errors_count += 1
            logger.error(f"Request {self._request_line} rejected: {e}")
            raise ProtocolError(str(e), cause=e) from e
        except Exception as e:
            self._errors_count += 1
            logger.error(f"Request {self._request_line} failed while sending: {e}")
            raise

    async def _send_event(self, event: h11.Event) -> None:
        """
        Send an h11 event to the network stream.

        Args:
            event: The h11 event to send
        """
        data = self._h11_connection.send(event)
        if data:
            await asyncio.wait_for(
                self._stream.write(data),
                timeout=self._write_timeout
            )
            self._bytes_sent += len(data)

    async def receive_response(self, handler: ResponseHandler) -> Any:
        """
        Read the response head and pass it to a handler.

        The handler is called as ``handler(response, stream)``; an
        awaitable result, such as a coroutine or Future, is awaited. The
        body stream reads from this connection, so it must be consumed
        before the connection is closed. Whatever the handler returns or
        raises reaches the caller unchanged.

        Args:
            handler: Callable receiving the response and its body stream

        Returns:
            The handler's result

        Raises:
            ConnectionError: If no request is in progress
            ProtocolError: If the server sends an invalid response
        """
        if self._state == ConnectionState.CLOSED:
            raise ConnectionError("Connection is closed")
        if self._state != ConnectionState.ACTIVE:
            raise ConnectionError("No request in progress")

        while True:
            event = await self._next_event()

            if isinstance(event, h11.InformationalResponse):
                logger.debug(f"Skipping informational response {event.status_code}")
                continue

            if isinstance(event, h11.Response):
                break

            if isinstance(event, h11.ConnectionClosed):
                self._errors_count += 1
                raise ProtocolError("Connection closed by server")

        headers: Headers = [(bytes(name), bytes(value)) for name, value in event.headers]
        response_stream = ResponseStream(
            connection=self,
            content_length=self._get_content_length(headers),
            chunked=self._is_chunked(headers),
        )
        response = Response(
            status_code=event.status_code,
            headers=headers,
            reason=bytes(event.reason),
            http_version=bytes(event.http_version),
            stream=response_stream,
        )

        duration = time.time() - (self._request_started or time.time())
        logger.debug(
            f"{self._request_line} -> {response.status_code} ({duration:.3f}s)"
        )

        result = handler(response, response_stream)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def _next_event(self) -> Any:
        """
        Get the next h11 event, reading from the network as needed.

        An empty read is passed on to h11 as end-of-stream, which lets it
        finish bodies delimited by connection close.
        """
        while True:
            try:
                event = self._h11_connection.next_event()
            except h11.RemoteProtocolError as e:
                self._errors_count += 1
                raise ProtocolError(str(e), cause=e) from e

            if event is not h11.NEED_DATA:
                return event

            data = await asyncio.wait_for(
                self._stream.read(self.READ_CHUNK_SIZE),
                timeout=self._read_timeout
            )
            self._h11_connection.receive_data(data)
            self._bytes_received += len(data)

    async def _receive_body_chunk(self) -> Optional[bytes]:
        """
        Receive a chunk of response body.

        Returns:
            Chunk of data or None if end of body
        """
        if self._state == ConnectionState.CLOSED:
            raise ConnectionError("Connection is closed")
        if self._state == ConnectionState.DONE:
            return None

        while True:
            event = await self._next_event()

            if isinstance(event, h11.Data):
                return bytes(event.data)

            if isinstance(event, h11.EndOfMessage):
                self._state = ConnectionState.DONE
                return None

            if isinstance(event, h11.ConnectionClosed):
                self._errors_count += 1
                raise ProtocolError("Connection closed by server")

    def _get_content_length(self, headers: Headers) -> Optional[int]:
        """
        Extract Content-Length from headers.

        Args:
            headers: List of (name, value) header tuples

        Returns:
            Content-Length value or None if not present
        """
        for name, value in headers:
            if name.lower() == b"content-length":
                try:
                    return int(value)
                except ValueError:
                    return None
        return None

    def _is_chunked(self, headers: Headers) -> bool:
        """
        Check if response uses chunked transfer encoding.

        Args:
            headers: List of (name, value) header tuples

        Returns:
            True if chunked transfer encoding is used
        """
        for name, value in headers:
            if name.lower() == b"transfer-encoding" and value.lower() == b"chunked":
                return True
        return False

    async def close(self) -> None:
        """
        Close the connection and cleanup resources.

        Closing an already closed connection does nothing.
        """
        if self._state == ConnectionState.CLOSED:
            return

        self._state = ConnectionState.CLOSED
        await self._stream.aclose()

        logger.debug(f"Connection to {self._host}:{self._port} closed")

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_closed(self) -> bool:
        """Check if connection is closed."""
        return self._state == ConnectionState.CLOSED

    @property
    def metrics(self) -> Dict[str, Any]:
        """
        Get connection metrics.

        Returns:
            Dictionary with connection metrics
        """
        return {
            "bytes_sent": self._bytes_sent,
            "bytes_received": self._bytes_received,
            "errors_count": self._errors_count,
            "state": self._state.value,
        }


async def open_connection(
    host: str,
    port: int,
    backend: NetworkBackend,
    connect_timeout: Optional[float] = None,
    read_timeout: Optional[float] = None,
    write_timeout: Optional[float] = None,
) -> HTTP11Connection:
    """
    Open a TCP connection and wrap it in an HTTP11Connection.

    Args:
        host: Target host
        port: Target port
        backend: Network backend used to connect
        connect_timeout: Timeout for establishing the connection in seconds
        read_timeout: Timeout for read operations in seconds
        write_timeout: Timeout for write operations in seconds

    Returns:
        A new, unused connection

    Raises:
        OSError: If the connection fails
        asyncio.TimeoutError: If the connection times out
    """
    stream = await backend.connect_tcp(host, port, timeout=connect_timeout)
    return HTTP11Connection(
        stream,
        host,
        port,
        read_timeout=read_timeout,
        write_timeout=write_timeout,
    )
