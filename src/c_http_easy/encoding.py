"""
URL encoding for c_http_easy.

This module implements the escaping described in RFC 2396 section 2.4
as used for ``application/x-www-form-urlencoded`` bodies. Input is
treated as raw bytes: multi-byte characters are escaped byte by byte.
"""

import string
from typing import Iterable, Tuple, Union

FORM_CONTENT_TYPE = b"application/x-www-form-urlencoded"

BytesLike = Union[bytes, bytearray, memoryview, str]
FormFields = Iterable[Tuple[BytesLike, BytesLike]]

_SAFE_BYTES = frozenset(
    (string.ascii_letters + string.digits + "$-.!*'(),").encode("ascii")
)

_HEX_DIGITS = b"0123456789abcdef"


def _escape(byte: int) -> bytes:
    if byte in _SAFE_BYTES:
        return bytes((byte,))
    if byte == 0x20:
        return b"+"
    return bytes((0x25, _HEX_DIGITS[byte >> 4], _HEX_DIGITS[byte & 0x0F]))


# One entry per byte value, so encoding is a single lookup per input byte.
_ENCODE_TABLE: Tuple[bytes, ...] = tuple(_escape(byte) for byte in range(256))


def _to_bytes(data: BytesLike) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def url_encode(data: BytesLike) -> bytes:
    """
    URL-escape a byte string.

    Letters, digits and ``$-.!*'(),`` pass through unchanged, a space
    becomes ``+`` and every other byte becomes ``%`` followed by two
    hex digits.

    Args:
        data: Bytes to escape. A ``str`` is UTF-8 encoded first.

    Returns:
        The escaped bytes.
    """
    table = _ENCODE_TABLE
    return b"".join([table[byte] for byte in _to_bytes(data)])


def url_decode(data: BytesLike) -> bytes:
    """
    Reverse :func:`url_encode`.

    Args:
        data: Escaped bytes. A ``str`` is UTF-8 encoded first.

    Returns:
        The original bytes.

    Raises:
        ValueError: If a ``%`` escape is truncated or not hexadecimal.
    """
    encoded = _to_bytes(data)
    decoded = bytearray()
    i = 0
    n = len(encoded)
    while i < n:
        byte = encoded[i]
        if byte == 0x2B:
            decoded.append(0x20)
            i += 1
        elif byte == 0x25:
            digits = encoded[i + 1:i + 3]
            if len(digits) != 2 or not all(d in b"0123456789abcdefABCDEF" for d in digits):
                raise ValueError(f"Invalid percent escape at offset {i}: {encoded[i:i + 3]!r}")
            decoded.append(int(digits, 16))
            i += 3
        else:
            decoded.append(byte)
            i += 1
    return bytes(decoded)


def encode_form(fields: FormFields) -> bytes:
    """
    Encode name/value pairs as an ``application/x-www-form-urlencoded`` body.

    Pairs keep their input order and duplicates are sent as given.

    Args:
        fields: Iterable of (name, value) pairs

    Returns:
        The body, e.g. ``b"a=1+2&b=x%26y"``
    """
    return b"&".join(
        url_encode(name) + b"=" + url_encode(value) for name, value in fields
    )
