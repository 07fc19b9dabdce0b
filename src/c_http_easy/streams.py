"""
Streaming framework for c_http_easy.

This module provides streaming abstractions for HTTP request and response bodies.
Response bodies are pulled from the connection chunk by chunk as the consumer
iterates, so nothing is read from the network until it is asked for.
"""

from abc import ABC, abstractmethod
from typing import (
    AsyncIterable,
    AsyncIterator,
    List,
    Optional,
    Union,
    TYPE_CHECKING,
)

from .exceptions import StreamError

if TYPE_CHECKING:
    from .http11 import HTTP11Connection  # Forward reference


class StreamInterface(ABC):
    """
    Base interface for all streams.

    All streams must implement this interface to ensure
    consistent behavior across the library.
    """

    @abstractmethod
    def __aiter__(self) -> "StreamInterface":
        """Return self as async iterator."""
        pass

    @abstractmethod
    async def __anext__(self) -> bytes:
        """Get next chunk of data."""
        pass

    @abstractmethod
    async def aclose(self) -> None:
        """Close the stream and cleanup resources."""
        pass

    @abstractmethod
    async def aread(self) -> bytes:
        """Read entire stream and return as bytes."""
        pass


class RequestStream(StreamInterface):
    """
    Stream for HTTP request bodies.

    A request stream replays its data exactly once: the connection
    drains it while sending, and a second iteration is an error.
    """

    def __init__(
        self,
        data: Union[bytes, List[bytes], AsyncIterable[bytes]],
        content_length: Optional[int] = None,
    ) -> None:
        """
        Initialize RequestStream.

        Args:
            data: The data to stream. Can be bytes, list of bytes, or async iterable
            content_length: Optional content length for validation
        """
        if content_length is not None and content_length < 0:
            raise ValueError("content_length must be non-negative")

        self._data = data
        self._content_length = content_length
        self._closed = False
        self._consumed = False
        self._iterator: Optional[AsyncIterator[bytes]] = None

        actual_length = self._calculate_actual_length()
        if (
            content_length is not None
            and actual_length is not None
            and actual_length != content_length
        ):
            raise ValueError(
                f"Actual content length ({actual_length}) "
                f"does not match provided content_length ({content_length})"
            )

    def _calculate_actual_length(self) -> Optional[int]:
        """Calculate the content length of the data, if known upfront."""
        if isinstance(self._data, bytes):
            return len(self._data)
        if isinstance(self._data, list):
            return sum(len(chunk) for chunk in self._data)
        return None

    async def _iter_chunks(self) -> AsyncIterator[bytes]:
        if isinstance(self._data, bytes):
            if self._data:
                yield self._data
        elif isinstance(self._data, list):
            for chunk in self._data:
                if chunk:  # Skip empty chunks
                    yield chunk
        else:
            async for chunk in self._data:
                if chunk:
                    yield chunk

    def __aiter__(self) -> "RequestStream":
        if self._closed:
            raise StreamError("Cannot iterate over closed stream")
        if self._consumed:
            raise StreamError("Request body has already been consumed")

        self._consumed = True
        self._iterator = self._iter_chunks()
        return self

    async def __anext__(self) -> bytes:
        if self._closed:
            raise StreamError("Cannot read from closed stream")
        if self._iterator is None:
            raise StreamError("Stream not initialized for iteration")

        return await self._iterator.__anext__()

    async def aread(self) -> bytes:
        """Read entire stream and return as bytes."""
        return await read_stream_to_bytes(self)

    async def aclose(self) -> None:
        """Close the stream and cleanup resources."""
        self._closed = True
        self._iterator = None

    @property
    def content_length(self) -> Optional[int]:
        return self._content_length

    @property
    def consumed(self) -> bool:
        return self._consumed

    @property
    def closed(self) -> bool:
        return self._closed


class ResponseStream(StreamInterface):
    """
    Stream for HTTP response bodies.

    Each iteration step asks the owning connection for the next
    decoded body chunk. The stream ends when the connection reports
    the end of the message.
    """

    def __init__(
        self,
        connection: "HTTP11Connection",
        content_length: Optional[int] = None,
        chunked: bool = False,
    ) -> None:
        """
        Initialize ResponseStream.

        Args:
            connection: The HTTP11Connection that owns this stream
            content_length: Optional content length for validation
            chunked: Whether response uses chunked transfer encoding
        """
        if content_length is not None and content_length < 0:
            raise ValueError("content_length must be non-negative")

        self._connection = connection
        self._content_length = content_length
        self._chunked = chunked
        self._closed = False
        self._finished = False
        self._bytes_read = 0

    def __aiter__(self) -> "ResponseStream":
        if self._closed:
            raise StreamError("Cannot iterate over closed stream")
        return self

    async def __anext__(self) -> bytes:
        if self._closed:
            raise StreamError("Cannot read from closed stream")
        if self._finished:
            raise StopAsyncIteration

        chunk = await self._connection._receive_body_chunk()
        if chunk is None:
            self._finished = True
            raise StopAsyncIteration

        self._bytes_read += len(chunk)
        if (self._content_length is not None and
                self._bytes_read > self._content_length):
            raise StreamError(
                f"Read more bytes ({self._bytes_read}) than "
                f"content_length ({self._content_length})"
            )

        return chunk

    async def aread(self) -> bytes:
        """Read the rest of the body and return it as bytes."""
        if self._closed:
            raise StreamError("Cannot read from closed stream")
        return await read_stream_to_bytes(self)

    async def aclose(self) -> None:
        """
        Stop reading the body.

        The connection itself is released by whoever opened it.
        """
        self._closed = True

    @property
    def content_length(self) -> Optional[int]:
        return self._content_length

    @property
    def chunked(self) -> bool:
        return self._chunked

    @property
    def finished(self) -> bool:
        """Whether the end of the body has been reached."""
        return self._finished

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def bytes_read(self) -> int:
        return self._bytes_read


async def read_stream_to_bytes(stream: AsyncIterable[bytes]) -> bytes:
    """
    Read entire stream and return as bytes.

    Args:
        stream: Async iterable of bytes

    Returns:
        All bytes from the stream concatenated
    """
    chunks = []
    async for chunk in stream:
        chunks.append(chunk)
    return b"".join(chunks)
