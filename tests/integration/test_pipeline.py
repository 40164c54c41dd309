import asyncio

import httpx
import pytest

from referent.fetch.base import BaseFetcher, FailureKind, FetchFailure, InvalidURLError
from referent.fetch.extractor import DATE_NOT_FOUND
from referent.services.article import ArticleFetchError, retrieve_article

WORDS = "word " * 30


class TestRetrieveArticle:
    """Full fetch -> extract flow with a simulated origin server"""

    def test_fetch_then_extract(self, make_fetcher):
        html = (
            '<html><head><meta property="og:title" content="Test Title"></head>'
            "<body><article><h1>Ignored</h1><p>" + WORDS + "</p></article></body></html>"
        )
        fetcher = make_fetcher(lambda request: httpx.Response(200, text=html))

        result = asyncio.run(retrieve_article("https://example.com/story", fetcher=fetcher))

        assert result.title == "Ignored"
        assert result.published_at == DATE_NOT_FOUND
        assert result.body.endswith(" ".join(["word"] * 30))

    def test_failure_is_typed(self, make_fetcher):
        fetcher = make_fetcher(lambda request: httpx.Response(404))

        with pytest.raises(ArticleFetchError) as exc_info:
            asyncio.run(retrieve_article("https://example.com/missing", fetcher=fetcher))

        assert exc_info.value.failure == FetchFailure(FailureKind.NOT_FOUND, 404, 1)
        assert "not_found" in str(exc_info.value)

    def test_extractor_not_run_on_failure(self, make_fetcher, monkeypatch):
        calls = []
        monkeypatch.setattr("referent.services.article.extract", lambda html: calls.append(html))
        fetcher = make_fetcher(lambda request: httpx.Response(500))

        with pytest.raises(ArticleFetchError):
            asyncio.run(retrieve_article("https://example.com/broken", fetcher=fetcher))

        assert calls == []

    def test_invalid_url_never_reaches_fetcher(self):
        class ExplodingFetcher(BaseFetcher):
            async def fetch(self, request):
                raise AssertionError("fetch should not be called")

        with pytest.raises(InvalidURLError):
            asyncio.run(retrieve_article("mailto:someone@example.com", fetcher=ExplodingFetcher()))
