"""
Request body materialization for c_http_easy.

HTTP/1.1 needs a Content-Length before the body goes out, but body
producers are handed a sink to push data into. This module captures
everything a producer writes, counts it, and packages it as a
RequestStream the connection can replay. The whole body is held in
memory for the duration of one request.
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, Tuple, Union

from .exceptions import StreamError
from .streams import RequestStream

logger = logging.getLogger(__name__)


class BodySink:
    """
    Write-only sink handed to body producers.

    Small writes are coalesced in a buffer; the buffer is moved to the
    captured chunk list once it reaches ``buffer_size`` bytes, on an
    explicit flush, and when the sink is closed. Writes never block, so
    the methods are plain calls usable from sync and async producers.
    """

    DEFAULT_BUFFER_SIZE = 32 * 1024  # 32KB

    def __init__(self, buffer_size: Optional[int] = None) -> None:
        if buffer_size is not None and buffer_size <= 0:
            raise ValueError("buffer_size must be positive")

        self._buffer_size = buffer_size or self.DEFAULT_BUFFER_SIZE
        self._buffer = bytearray()
        self._chunks: List[bytes] = []
        self._bytes_written = 0
        self._closed = False

    def write(self, data: Union[bytes, bytearray, memoryview, str]) -> None:
        """
        Write a chunk of body data.

        Args:
            data: The data to write. A ``str`` is UTF-8 encoded.

        Raises:
            StreamError: If the sink has been closed.
            TypeError: If data is not bytes-like or str.
        """
        if self._closed:
            raise StreamError("Cannot write to closed sink")

        if isinstance(data, str):
            data = data.encode("utf-8")
        elif not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(
                f"body chunks must be bytes-like or str, not {type(data).__name__}"
            )

        self._buffer += data
        if len(self._buffer) >= self._buffer_size:
            self._flush_buffer()

    def flush(self) -> None:
        """Move buffered data to the captured chunks."""
        if self._closed:
            raise StreamError("Cannot flush closed sink")
        self._flush_buffer()

    def close(self) -> None:
        """Flush what is left and refuse further writes."""
        if not self._closed:
            self._flush_buffer()
            self._closed = True

    def _flush_buffer(self) -> None:
        if self._buffer:
            chunk = bytes(self._buffer)
            self._chunks.append(chunk)
            self._bytes_written += len(chunk)
            self._buffer.clear()

    @property
    def bytes_written(self) -> int:
        """Number of bytes flushed so far."""
        return self._bytes_written

    @property
    def chunks(self) -> Tuple[bytes, ...]:
        return tuple(self._chunks)

    @property
    def closed(self) -> bool:
        return self._closed


BodyProducer = Callable[[BodySink], Union[Awaitable[Any], Any]]


@dataclass(frozen=True)
class MaterializedBody:
    """A captured request body and its exact length in bytes."""

    chunks: Tuple[bytes, ...]
    content_length: int

    def stream(self) -> RequestStream:
        """Return a single-use stream replaying the captured chunks in order."""
        return RequestStream(list(self.chunks), content_length=self.content_length)

    def to_bytes(self) -> bytes:
        return b"".join(self.chunks)


async def materialize_body(
    producer: BodyProducer,
    buffer_size: Optional[int] = None,
) -> MaterializedBody:
    """
    Run a body producer against an in-memory sink.

    The producer may be a coroutine function or a plain function; an
    awaitable result is awaited before the sink is closed. Any
    exception it raises propagates unchanged and the captured data is
    dropped.

    Args:
        producer: Callable taking a BodySink and writing the body into it
        buffer_size: Optional sink buffer size in bytes

    Returns:
        The captured body with its byte count
    """
    sink = BodySink(buffer_size)

    result = producer(sink)
    if inspect.isawaitable(result):
        await result

    sink.close()

    body = MaterializedBody(chunks=sink.chunks, content_length=sink.bytes_written)
    logger.debug(
        f"Materialized request body: {body.content_length} bytes "
        f"in {len(body.chunks)} chunks"
    )
    return body
