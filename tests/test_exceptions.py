"""
Unit tests for custom exceptions.

Tests the exception hierarchy to ensure proper error handling
and cause tracking.
"""

import pytest

from c_http_easy.exceptions import (
    HTTPCoreError,
    MalformedURLError,
    UnsupportedSchemeError,
    ConnectionError,
    ProtocolError,
    StreamError,
)


class TestHTTPCoreError:
    """Test base HTTPCoreError class."""

    def test_basic_creation(self) -> None:
        """Test creating basic HTTPCoreError."""
        error = HTTPCoreError("Test error message")
        assert str(error) == "Test error message"
        assert error.message == "Test error message"
        assert error.cause is None

    def test_with_cause(self) -> None:
        """Test creating HTTPCoreError with cause."""
        original_error = ValueError("Original error")
        error = HTTPCoreError("Test error message", cause=original_error)
        assert str(error) == "Test error message"
        assert error.cause is original_error


class TestMalformedURLError:
    """Test MalformedURLError class."""

    def test_basic_creation(self) -> None:
        error = MalformedURLError("not a url")
        assert str(error) == "Can't parse URI not a url"
        assert error.url == "not a url"
        assert error.cause is None

    def test_with_reason(self) -> None:
        error = MalformedURLError("http://x:abc/", "invalid port")
        assert str(error) == "Can't parse URI http://x:abc/ (invalid port)"


class TestUnsupportedSchemeError:
    """Test UnsupportedSchemeError class."""

    def test_basic_creation(self) -> None:
        error = UnsupportedSchemeError("Unknown URI scheme ftp:", "ftp")
        assert str(error) == "Unknown URI scheme ftp:"
        assert error.scheme == "ftp"

    def test_scheme_defaults_empty(self) -> None:
        assert UnsupportedSchemeError("SSL support not yet implemented").scheme == ""


class TestConnectionError:
    """Test ConnectionError class."""

    def test_basic_creation(self) -> None:
        """Test creating basic ConnectionError."""
        error = ConnectionError("Connection is closed")
        assert str(error) == "Connection error: Connection is closed"
        assert error.message == "Connection error: Connection is closed"
        assert error.cause is None

    def test_with_cause(self) -> None:
        """Test creating ConnectionError with cause."""
        original_error = OSError("Network unreachable")
        error = ConnectionError("Connection failed", cause=original_error)
        assert error.cause is original_error


class TestProtocolError:
    """Test ProtocolError class."""

    def test_basic_creation(self) -> None:
        """Test creating basic ProtocolError."""
        error = ProtocolError("Invalid HTTP version")
        assert str(error) == "Protocol error: Invalid HTTP version"
        assert error.cause is None

    def test_with_cause(self) -> None:
        """Test creating ProtocolError with cause."""
        original_error = ValueError("Invalid format")
        error = ProtocolError("Invalid HTTP version", cause=original_error)
        assert error.cause is original_error


class TestStreamError:
    """Test StreamError class."""

    def test_basic_creation(self) -> None:
        """Test creating basic StreamError."""
        error = StreamError("Stream closed unexpectedly")
        assert str(error) == "Stream error: Stream closed unexpectedly"
        assert error.message == "Stream error: Stream closed unexpectedly"


class TestExceptionHierarchy:
    """Test exception hierarchy and inheritance."""

    @pytest.mark.parametrize(
        "exc_class",
        [MalformedURLError, UnsupportedSchemeError, ConnectionError, ProtocolError, StreamError],
    )
    def test_inheritance(self, exc_class) -> None:
        """Test that all exceptions inherit from HTTPCoreError."""
        assert issubclass(exc_class, HTTPCoreError)

    def test_connection_error_shadows_builtin(self) -> None:
        """The library ConnectionError is not an OSError."""
        assert not issubclass(ConnectionError, OSError)

    def test_exception_raising(self) -> None:
        """Test that exceptions can be raised and caught as the base class."""
        with pytest.raises(HTTPCoreError) as exc_info:
            raise ProtocolError("Protocol violation")

        assert "Protocol error: Protocol violation" in str(exc_info.value)
