"""
Convenience HTTP client for c_http_easy.

Each call opens a fresh connection, sends one request and hands the
response to a caller-supplied handler:

    async def handler(response, stream):
        return response.status_code, await stream.aread()

    status, body = await get("http://example.com/", handler)

The connection is closed once the handler returns or raises, so the
handler must consume the body stream before it returns.

Request bodies are written by a producer into a sink. HTTP/1.1 needs
the Content-Length up front, so the whole body is captured in memory
before anything is sent. To stream a large body of known size, use
``open_connection`` and ``HTTP11Connection`` directly.
"""

import logging
from typing import Any, Optional, Union

from .body import BodyProducer, BodySink, materialize_body
from .encoding import FORM_CONTENT_TYPE, FormFields, encode_form
from .exceptions import UnsupportedSchemeError
from .http11 import HTTP11Connection, ResponseHandler, open_connection
from .http_primitives import Response
from .network.asyncio_backend import AsyncioNetworkBackend
from .network.backend import NetworkBackend
from .streams import ResponseStream
from .urls import URL, parse_url

logger = logging.getLogger(__name__)

ACCEPT_ANY = b"*/*"


class Client:
    """
    Entry point for one-shot HTTP requests.

    A Client only holds configuration; it keeps no connections between
    calls, so one instance can be shared by concurrent tasks.
    """

    DEFAULT_CONNECT_TIMEOUT = 30.0  # 30 seconds

    def __init__(
        self,
        backend: Optional[NetworkBackend] = None,
        connect_timeout: Optional[float] = None,
        read_timeout: Optional[float] = None,
        write_timeout: Optional[float] = None,
        buffer_size: Optional[int] = None,
    ):
        """
        Initialize the client.

        Args:
            backend: Network backend to connect with (asyncio sockets by default)
            connect_timeout: Timeout for establishing connections in seconds
            read_timeout: Timeout for read operations in seconds
            write_timeout: Timeout for write operations in seconds
            buffer_size: Write buffer size of the body sink in bytes
        """
        self._backend = backend or AsyncioNetworkBackend()
        self._connect_timeout = connect_timeout if connect_timeout is not None else self.DEFAULT_CONNECT_TIMEOUT
        self._read_timeout = read_timeout
        self._write_timeout = write_timeout
        self._buffer_size = buffer_size

    async def _establish(self, url: URL) -> HTTP11Connection:
        """
        Open a connection suitable for the URL's scheme.

        Raises:
            UnsupportedSchemeError: For https and unknown schemes, before
                                    any socket is opened
        """
        if url.scheme == "https":
            raise UnsupportedSchemeError("SSL support not yet implemented", url.scheme)
        if url.scheme != "http":
            raise UnsupportedSchemeError(f"Unknown URI scheme {url.scheme}:", url.scheme)

        return await open_connection(
            url.host,
            url.port,
            self._backend,
            connect_timeout=self._connect_timeout,
            read_timeout=self._read_timeout,
            write_timeout=self._write_timeout,
        )

    async def get(self, url: Union[str, bytes], handler: ResponseHandler) -> Any:
        """
        Issue a GET request and pass the response to a handler.

        Args:
            url: Resource to GET
            handler: Called as ``handler(response, stream)``

        Returns:
            The handler's result
        """
        u = parse_url(url)
        connection = await self._establish(u)
        try:
            request = connection.build_request(b"GET", u.target, accept=ACCEPT_ANY)
            await connection.send_request(request)
            return await connection.receive_response(handler)
        finally:
            await connection.close()

    async def post(
        self,
        url: Union[str, bytes],
        content_type: Union[str, bytes],
        body: BodyProducer,
        handler: ResponseHandler,
    ) -> Any:
        """
        Send content to a server with a POST request.

        Args:
            url: Resource to POST to
            content_type: MIME type of the request body
            body: Producer writing the request body into a BodySink
            handler: Called as ``handler(response, stream)``

        Returns:
            The handler's result
        """
        u = parse_url(url)
        connection = await self._establish(u)
        try:
            materialized = await materialize_body(body, self._buffer_size)
            request = connection.build_request(
                b"POST",
                u.target,
                accept=ACCEPT_ANY,
                content_type=content_type,
                content_length=materialized.content_length,
            )
            await connection.send_request(request, materialized.stream())
            return await connection.receive_response(handler)
        finally:
            await connection.close()

    async def post_form(
        self,
        url: Union[str, bytes],
        fields: FormFields,
        handler: ResponseHandler,
    ) -> Any:
        """
        Send form data to a server with a POST request.

        The body is sent as ``application/x-www-form-urlencoded``, which
        is what browsers send on form submission. Use post() for any
        other content type.

        Args:
            url: Resource to POST to
            fields: (name, value) pairs, URL-encoded in the given order
            handler: Called as ``handler(response, stream)``

        Returns:
            The handler's result
        """
        encoded = encode_form(fields)

        async def parameters(sink: BodySink) -> None:
            sink.write(encoded)

        return await self.post(url, FORM_CONTENT_TYPE, parameters, handler)

    async def put(
        self,
        url: Union[str, bytes],
        content_type: Union[str, bytes],
        body: BodyProducer,
        handler: ResponseHandler,
    ) -> Any:
        """
        Place content on the server with a PUT request.

        Content-Type and Content-Length are set as raw headers; the body
        must fit in memory because its length is needed before sending.

        Args:
            url: Resource to PUT to
            content_type: MIME type of the request body
            body: Producer writing the request body into a BodySink
            handler: Called as ``handler(response, stream)``

        Returns:
            The handler's result
        """
        u = parse_url(url)
        connection = await self._establish(u)
        try:
            materialized = await materialize_body(body, self._buffer_size)
            request = connection.build_request(
                b"PUT",
                u.target,
                accept=ACCEPT_ANY,
                headers=[
                    (b"Content-Type", content_type),
                    (b"Content-Length", str(materialized.content_length)),
                ],
            )
            await connection.send_request(request, materialized.stream())
            return await connection.receive_response(handler)
        finally:
            await connection.close()


async def get(
    url: Union[str, bytes],
    handler: ResponseHandler,
    backend: Optional[NetworkBackend] = None,
) -> Any:
    """Issue a GET request with a default Client. See Client.get()."""
    return await Client(backend).get(url, handler)


async def post(
    url: Union[str, bytes],
    content_type: Union[str, bytes],
    body: BodyProducer,
    handler: ResponseHandler,
    backend: Optional[NetworkBackend] = None,
) -> Any:
    """Issue a POST request with a default Client. See Client.post()."""
    return await Client(backend).post(url, content_type, body, handler)


async def post_form(
    url: Union[str, bytes],
    fields: FormFields,
    handler: ResponseHandler,
    backend: Optional[NetworkBackend] = None,
) -> Any:
    """POST URL-encoded form fields with a default Client. See Client.post_form()."""
    return await Client(backend).post_form(url, fields, handler)


async def put(
    url: Union[str, bytes],
    content_type: Union[str, bytes],
    body: BodyProducer,
    handler: ResponseHandler,
    backend: Optional[NetworkBackend] = None,
) -> Any:
    """Issue a PUT request with a default Client. See Client.put()."""
    return await Client(backend).put(url, content_type, body, handler)


async def concat_handler(response: Response, stream: ResponseStream) -> bytes:
    """
    Handler returning the whole response body.

    The status code is ignored, so a 404 page comes back like any
    other body. Write your own handler when the status matters.
    """
    return await stream.aread()


def file_body(path: str, chunk_size: int = 65536) -> BodyProducer:
    """
    Make a body producer that copies a file into the sink.

    Args:
        path: File to send
        chunk_size: Bytes read per write

    Returns:
        A producer for post() or put()
    """
    async def producer(sink: BodySink) -> None:
        with open(path, "rb") as f:
            while True:
                chunk = f.read(chunk_size)
                if not chunk:
                    break
                sink.write(chunk)

    return producer
