"""
c_http_easy - One-call HTTP requests over an asyncio HTTP/1.1 core

GET, POST, form POST and PUT in a single awaitable call each: the
connection is opened, the request sent, the response handed to your
handler and the connection closed again, whatever the handler does.
"""

__version__ = "0.1.0"
__author__ = "Developer"
__email__ = "dev@example.com"

# Import main components for easy access
from .http_primitives import Request, Response
from .http11 import HTTP11Connection, ConnectionState, open_connection
from .exceptions import (
    HTTPCoreError,
    MalformedURLError,
    UnsupportedSchemeError,
    ConnectionError,
    ProtocolError,
    StreamError,
)
from .encoding import FORM_CONTENT_TYPE, url_encode, url_decode, encode_form
from .body import BodySink, MaterializedBody, materialize_body
from .urls import URL, parse_url
from .streams import RequestStream, ResponseStream, read_stream_to_bytes
from .client import (
    Client,
    get,
    post,
    post_form,
    put,
    concat_handler,
    file_body,
)

__all__ = [
    "Request",
    "Response",
    "HTTP11Connection",
    "ConnectionState",
    "open_connection",
    "HTTPCoreError",
    "MalformedURLError",
    "UnsupportedSchemeError",
    "ConnectionError",
    "ProtocolError",
    "StreamError",
    "FORM_CONTENT_TYPE",
    "url_encode",
    "url_decode",
    "encode_form",
    "BodySink",
    "MaterializedBody",
    "materialize_body",
    "URL",
    "parse_url",
    "RequestStream",
    "ResponseStream",
    "read_stream_to_bytes",
    "Client",
    "get",
    "post",
    "post_form",
    "put",
    "concat_handler",
    "file_body",
]
