"""
Unit tests for URL parsing.
"""

import pytest

from c_http_easy.exceptions import HTTPCoreError, MalformedURLError
from c_http_easy.urls import URL, parse_url


class TestParseUrl:
    """Test parse_url."""

    def test_full_url(self) -> None:
        url = parse_url("http://example.com/a?b#c")

        assert url == URL(
            scheme="http",
            host="example.com",
            port=80,
            path="/a",
            query="?b",
            fragment="#c",
        )
        assert url.target == b"/a?b#c"

    def test_bytes_input(self) -> None:
        url = parse_url(b"http://example.com:8080/index.html")
        assert url.host == "example.com"
        assert url.port == 8080
        assert url.path == "/index.html"
        assert url.query == ""
        assert url.fragment == ""

    def test_empty_path_targets_root(self) -> None:
        url = parse_url("http://example.com")
        assert url.path == ""
        assert url.target == b"/"

    def test_query_without_path(self) -> None:
        url = parse_url("http://example.com?x=1")
        assert url.path == ""
        assert url.query == "?x=1"
        assert url.target == b"?x=1"

    def test_empty_query_kept(self) -> None:
        url = parse_url("http://example.com/a?")
        assert url.query == "?"
        assert url.target == b"/a?"

    def test_missing_authority_defaults_to_localhost(self) -> None:
        url = parse_url("http:/status")
        assert url.host == "localhost"
        assert url.port == 80
        assert url.path == "/status"

    def test_empty_authority_defaults_to_localhost(self) -> None:
        assert parse_url("http:///status").host == "localhost"

    def test_scheme_lowercased(self) -> None:
        assert parse_url("HTTP://Example.COM/").scheme == "http"
        assert parse_url("HTTP://Example.COM/").host == "example.com"

    def test_https_parses_with_default_port(self) -> None:
        url = parse_url("https://x")
        assert url.scheme == "https"
        assert url.host == "x"
        assert url.port == 80

    def test_ipv6_host(self) -> None:
        url = parse_url("http://[::1]:8000/")
        assert url.host == "::1"
        assert url.port == 8000

    def test_userinfo_ignored_for_host(self) -> None:
        url = parse_url("http://user:pw@example.com:81/")
        assert url.host == "example.com"
        assert url.port == 81

    def test_empty_port_defaults(self) -> None:
        assert parse_url("http://example.com:/").port == 80

    def test_percent_escapes_kept(self) -> None:
        url = parse_url("http://example.com/a%20b?q=%2F")
        assert url.target == b"/a%20b?q=%2F"

    @pytest.mark.parametrize(
        "bad",
        [
            "not a url",
            "",
            "example.com/path",
            "/relative/path",
            "1http://example.com/",
            "http://example.com/a b",
            "http://example.com/<tag>",
            "http://example.com/%zz",
            "http://example.com/%4",
            "http://example.com:abc/",
            "http://example.com:0/",
            "http://example.com:65536/",
            b"http://example.com/\xff",
        ],
    )
    def test_malformed(self, bad) -> None:
        with pytest.raises(MalformedURLError, match="Can't parse URI"):
            parse_url(bad)

    def test_malformed_is_core_error(self) -> None:
        with pytest.raises(HTTPCoreError):
            parse_url("not a url")
