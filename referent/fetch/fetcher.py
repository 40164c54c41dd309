import asyncio
import logging
import random
import time
from typing import Awaitable, Callable, Optional, Union

import httpx

from referent.core.config import settings
from referent.fetch.base import (
    BaseFetcher,
    FailureKind,
    FetchAttempt,
    FetchFailure,
    FetchOutcome,
    FetchRequest,
    FetchSuccess,
)
from referent.fetch.headers import build_headers

logger = logging.getLogger(__name__)

_STATUS_FAILURES = {
    403: FailureKind.FORBIDDEN,
    404: FailureKind.NOT_FOUND,
    429: FailureKind.RATE_LIMITED,
}


class ResilientFetcher(BaseFetcher):
    """
    Fetch raw page HTML with a bounded retry budget.

    Attempts run strictly one after another. 403 responses and timeouts are
    retried with a fresh header profile after an exponential backoff; every
    other failure is returned immediately as a ``FetchFailure``.
    """

    def __init__(
        self,
        max_attempts: Optional[int] = None,
        timeout_sec: Optional[float] = None,
        backoff_base_sec: Optional[float] = None,
        backoff_jitter_sec: Optional[float] = None,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.max_attempts = max(1, settings.FETCH_MAX_ATTEMPTS if max_attempts is None else max_attempts)
        self.timeout_sec = timeout_sec if timeout_sec is not None else settings.FETCH_TIMEOUT_SECONDS
        self.backoff_base_sec = (
            backoff_base_sec if backoff_base_sec is not None else settings.FETCH_BACKOFF_BASE_SECONDS
        )
        jitter = backoff_jitter_sec if backoff_jitter_sec is not None else settings.FETCH_BACKOFF_JITTER_SECONDS
        self.backoff_jitter_sec = min(max(jitter, 0.0), self.backoff_base_sec / 2)
        self.rng = rng or random.Random()
        self.sleep = sleep
        self.clock = clock
        self.transport = transport

    def backoff_delay(self, attempt_index: int) -> float:
        """Delay to wait after the failed attempt ``attempt_index`` (0-based)."""
        jitter = self.rng.uniform(0, self.backoff_jitter_sec) if self.backoff_jitter_sec else 0.0
        return self.backoff_base_sec * (2 ** attempt_index) + jitter

    def new_attempt(self, url: str, attempt_index: int) -> FetchAttempt:
        return FetchAttempt(
            attempt_index=attempt_index,
            headers=build_headers(url, attempt_index, self.rng),
            deadline=self.clock() + self.timeout_sec,
        )

    async def fetch(self, request: Union[FetchRequest, str]) -> FetchOutcome:
        if not isinstance(request, FetchRequest):
            request = FetchRequest(request)
        url = request.url

        async with httpx.AsyncClient(follow_redirects=True, transport=self.transport) as client:
            attempts = 0
            while True:
                attempt = self.new_attempt(url, attempts)
                attempts += 1
                logger.info(
                    "Fetch attempt %d/%d for %s (UA: %s)",
                    attempts, self.max_attempts, url, attempt.headers["User-Agent"][:60],
                )

                outcome = await self._attempt(client, url, attempt, attempts)
                if isinstance(outcome, FetchSuccess):
                    logger.info(
                        "Fetched %s: status=%d, %d bytes, %d attempt(s)",
                        outcome.final_url, outcome.status_code, len(outcome.html), attempts,
                    )
                    return outcome

                if not outcome.kind.retryable or attempts >= self.max_attempts:
                    logger.warning(
                        "Fetch failed for %s: kind=%s status=%s attempts=%d",
                        url, outcome.kind.value, outcome.status_code, attempts,
                    )
                    return outcome

                delay = self.backoff_delay(attempt.attempt_index)
                logger.info(
                    "Retryable failure (%s) for %s, retrying in %.2fs",
                    outcome.kind.value, url, delay,
                )
                await self.sleep(delay)

    async def _attempt(
        self,
        client: httpx.AsyncClient,
        url: str,
        attempt: FetchAttempt,
        attempts: int,
    ) -> FetchOutcome:
        remaining = max(attempt.deadline - self.clock(), 0.0)
        try:
            return await asyncio.wait_for(
                self._download(client, url, attempt, attempts, remaining),
                timeout=remaining,
            )
        except (httpx.TimeoutException, asyncio.TimeoutError):
            return FetchFailure(FailureKind.TIMEOUT, None, attempts)
        except httpx.TooManyRedirects:
            return FetchFailure(FailureKind.HTTP_ERROR, None, attempts)
        except httpx.TransportError as e:
            logger.debug("Transport error for %s: %r", url, e)
            return FetchFailure(FailureKind.UNREACHABLE, None, attempts)
        except httpx.RequestError as e:
            logger.debug("Request error for %s: %r", url, e)
            return FetchFailure(FailureKind.UNREACHABLE, None, attempts)

    async def _download(
        self,
        client: httpx.AsyncClient,
        url: str,
        attempt: FetchAttempt,
        attempts: int,
        timeout: float,
    ) -> FetchOutcome:
        request = client.build_request("GET", url, headers=attempt.headers, timeout=timeout)
        response = await client.send(request, stream=True)
        try:
            await response.aread()
        except httpx.DecodingError as e:
            # Server answered but the body cannot be decoded with its Content-Encoding
            status = response.status_code
            logger.warning("Undecodable body from %s (status=%d): %s", url, status, e)
            return FetchFailure(_STATUS_FAILURES.get(status, FailureKind.HTTP_ERROR), status, attempts)
        finally:
            await response.aclose()
        return classify_response(response, attempts)


def classify_response(response: httpx.Response, attempts: int) -> FetchOutcome:
    status = response.status_code
    if 200 <= status < 300:
        if not response.content:
            return FetchFailure(FailureKind.EMPTY_BODY, status, attempts)
        return FetchSuccess(
            html=response.content,
            status_code=status,
            final_url=str(response.url),
            attempts=attempts,
        )
    kind = _STATUS_FAILURES.get(status, FailureKind.HTTP_ERROR)
    return FetchFailure(kind, status, attempts)
