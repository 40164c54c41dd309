import logging
from typing import Optional

from referent.fetch.base import BaseFetcher, FetchFailure, FetchRequest, FetchSuccess
from referent.fetch.extractor import ExtractionResult, extract
from referent.fetch.fetcher import ResilientFetcher

logger = logging.getLogger(__name__)


class ArticleFetchError(Exception):
    """The page could not be retrieved; ``failure`` says why."""

    def __init__(self, failure: FetchFailure):
        self.failure = failure
        status = failure.status_code if failure.status_code is not None else "none"
        super().__init__(
            f"Fetch failed: {failure.kind.value} (status={status}, attempts={failure.attempts})"
        )


async def retrieve_article(url: str, fetcher: Optional[BaseFetcher] = None) -> ExtractionResult:
    """
    Fetch a page and extract its title, publication date and body.

    1. Validate the URL (raises ``InvalidURLError``)
    2. Fetch with retries (raises ``ArticleFetchError`` on failure)
    3. Extract fields; misses come back as sentinel strings
    """
    request = FetchRequest(url)
    fetcher = fetcher or ResilientFetcher()

    outcome = await fetcher.fetch(request)
    if not isinstance(outcome, FetchSuccess):
        raise ArticleFetchError(outcome)

    result = extract(outcome.html)
    logger.info(
        "Extracted %s: title=%r, date=%r, body=%d chars",
        request.url, result.title[:80], result.published_at, len(result.body),
    )
    return result
