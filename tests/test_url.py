import pytest

from xhttp.models.errors import InvalidUrl
from xhttp.url import construct_url


class TestConstructUrl:
    def test_fully_qualified_url_is_unchanged(self):
        url = "https://example.com/path?x=1#frag"
        assert construct_url(url) == url
        assert construct_url(construct_url(url)) == url

    def test_missing_scheme_defaults_to_https(self):
        assert construct_url("example.com/api") == "https://example.com/api"

    def test_default_scheme_override(self):
        assert construct_url("example.com", default_scheme="http") == "http://example.com"

    def test_default_scheme_accepts_separator(self):
        assert construct_url("example.com", default_scheme="http://") == "http://example.com"

    @pytest.mark.parametrize(
        "shorthand,expected",
        [
            (":3000/users", "https://localhost:3000/users"),
            (":/users", "https://localhost/users"),
            (":", "https://localhost"),
        ],
    )
    def test_localhost_shorthand(self, shorthand, expected):
        assert construct_url(shorthand) == expected

    def test_host_with_port_without_scheme(self):
        assert construct_url("localhost:8000", default_scheme="http") == (
            "http://localhost:8000"
        )

    def test_query_items_are_appended(self):
        url = construct_url("https://example.com/s", query=[("q", "a b"), ("page", "2")])
        assert url == "https://example.com/s?q=a%20b&page=2"

    def test_input_query_precedes_items_without_dedup(self):
        url = construct_url(
            "https://example.com/s?page=1#top", query=[("page", "2"), ("page", "3")]
        )
        assert url == "https://example.com/s?page=1&page=2&page=3#top"

    @pytest.mark.parametrize(
        "url",
        ["ftp://example.com/file", "https://", "http://example.com:notaport"],
    )
    def test_invalid(self, url):
        with pytest.raises(InvalidUrl):
            construct_url(url)
