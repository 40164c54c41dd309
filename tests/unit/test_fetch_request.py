import pytest

from referent.fetch.base import FetchRequest, InvalidURLError


class TestFetchRequest:
    """URL validation done by the caller before fetching"""

    @pytest.mark.parametrize("url", [
        "http://example.com",
        "https://example.com/news/1?x=y#top",
        "HTTPS://Example.com/path",
    ])
    def test_accepts_http_urls(self, url):
        assert FetchRequest(url).url == url

    def test_strips_surrounding_whitespace(self):
        assert FetchRequest("  https://example.com/a  ").url == "https://example.com/a"

    @pytest.mark.parametrize("url", [
        "ftp://example.com/file",
        "javascript:alert(1)",
        "file:///etc/passwd",
        "not-a-url",
    ])
    def test_rejects_other_schemes(self, url):
        with pytest.raises(InvalidURLError, match="Only HTTP and HTTPS"):
            FetchRequest(url)

    @pytest.mark.parametrize("url", ["http://", "https:///path"])
    def test_rejects_missing_host(self, url):
        with pytest.raises(InvalidURLError, match="Invalid URL format"):
            FetchRequest(url)

    def test_rejects_empty(self):
        with pytest.raises(InvalidURLError, match="URL is required"):
            FetchRequest("")

    def test_is_immutable(self):
        request = FetchRequest("https://example.com")
        with pytest.raises(AttributeError):
            request.url = "https://other.com"
