import random

import httpx
import pytest

from referent.core.config import settings
from referent.fetch.fetcher import ResilientFetcher


class SleepRecorder:
    """Stands in for asyncio.sleep and remembers the requested delays"""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """Keep tests independent of the developer's environment"""
    monkeypatch.setattr(settings, "USE_MOCK", False)
    monkeypatch.setattr(settings, "OPENROUTER_API_KEY", None)
    yield


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()


@pytest.fixture
def make_fetcher(sleep_recorder):
    """Build a ResilientFetcher whose network is the given request handler"""

    def _make(handler, **kwargs):
        kwargs.setdefault("max_attempts", 4)
        kwargs.setdefault("backoff_base_sec", 1.0)
        kwargs.setdefault("backoff_jitter_sec", 0.3)
        kwargs.setdefault("rng", random.Random(1234))
        kwargs.setdefault("sleep", sleep_recorder)
        return ResilientFetcher(transport=httpx.MockTransport(handler), **kwargs)

    return _make
