"""
URL parsing for c_http_easy.

Turns a URL string into the pieces needed to open a connection and
address a resource on it.
"""

import re
from typing import NamedTuple, Union
from urllib.parse import urlsplit

from .exceptions import MalformedURLError
from .network.utils import validate_port

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 80

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")
_INVALID_CHAR_RE = re.compile(r"[^A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%]")
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class URL(NamedTuple):
    """Immutable representation of a parsed URL."""
    scheme: str
    host: str
    port: int
    path: str
    query: str
    fragment: str

    @property
    def target(self) -> bytes:
        """The request target: path, query and fragment, never empty."""
        target = self.path + self.query + self.fragment
        return (target or "/").encode("ascii")


def parse_url(url: Union[bytes, str]) -> URL:
    """
    Parse an absolute URL.

    A URL without an authority addresses ``localhost``; one without a
    port addresses port 80. ``query`` keeps its leading ``?`` and
    ``fragment`` its leading ``#`` so they can be concatenated back
    onto the path.

    Args:
        url: URL as bytes or str

    Returns:
        The parsed URL

    Raises:
        MalformedURLError: If the input is not a valid absolute URI
    """
    if isinstance(url, (bytes, bytearray)):
        try:
            text = bytes(url).decode("ascii")
        except UnicodeDecodeError:
            raise MalformedURLError(repr(url), "non-ASCII characters")
    else:
        text = url

    if not _SCHEME_RE.match(text):
        raise MalformedURLError(text, "missing scheme")

    invalid = _INVALID_CHAR_RE.search(text)
    if invalid:
        raise MalformedURLError(text, f"invalid character {invalid.group()!r}")

    if _BAD_ESCAPE_RE.search(text):
        raise MalformedURLError(text, "invalid percent escape")

    try:
        parts = urlsplit(text)
        port = parts.port
    except ValueError as e:
        raise MalformedURLError(text, str(e))

    if port is None:
        port = DEFAULT_PORT
    else:
        try:
            port = validate_port(port)
        except ValueError as e:
            raise MalformedURLError(text, str(e))

    before_fragment, hash_mark, fragment = text.partition("#")
    question_mark = "?" if "?" in before_fragment else ""

    return URL(
        scheme=parts.scheme.lower(),
        host=parts.hostname or DEFAULT_HOST,
        port=port,
        path=parts.path,
        query=question_mark + parts.query,
        fragment=hash_mark + fragment,
    )
