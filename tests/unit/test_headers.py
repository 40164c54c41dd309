import random

from referent.fetch.headers import SEARCH_REFERER, USER_AGENTS, build_headers, origin_of

URL = "https://blog.example.org/posts/42?ref=home"


class FixedChoice(random.Random):
    """Random source that always picks the same pool entry"""

    def __init__(self, index):
        super().__init__(0)
        self.index = index

    def choice(self, seq):
        return seq[self.index]


class TestHeaderProfiles:
    """Unit tests for simulated browser header profiles"""

    def test_same_seed_same_profile(self):
        """Profiles are reproducible from a seeded random source"""
        first = [build_headers(URL, i, random.Random(42)) for i in range(4)]
        second = [build_headers(URL, i, random.Random(42)) for i in range(4)]
        assert first == second

    def test_user_agent_from_pool(self):
        pool = {user_agent for user_agent, _ in USER_AGENTS}
        rng = random.Random(7)
        for attempt in range(10):
            assert build_headers(URL, attempt, rng)["User-Agent"] in pool

    def test_first_attempt_looks_like_direct_navigation(self):
        headers = build_headers(URL, 0, random.Random(1))
        assert headers["Referer"] == "https://blog.example.org"
        assert headers["Origin"] == "https://blog.example.org"
        assert headers["Sec-Fetch-Site"] == "none"

    def test_retry_looks_like_search_click_through(self):
        headers = build_headers(URL, 2, random.Random(1))
        assert headers["Referer"] == SEARCH_REFERER
        assert headers["Sec-Fetch-Site"] == "cross-site"
        assert "Origin" not in headers

    def test_navigation_headers_present(self):
        headers = build_headers(URL, 0, random.Random(3))
        for name in (
            "Accept", "Accept-Language", "Accept-Encoding", "Connection",
            "Upgrade-Insecure-Requests", "Sec-Fetch-Dest", "Sec-Fetch-Mode", "Sec-Fetch-User",
        ):
            assert headers[name]
        assert headers["Sec-Fetch-Mode"] == "navigate"

    def test_client_hints_only_for_chromium(self):
        for index, (user_agent, hints) in enumerate(USER_AGENTS):
            headers = build_headers(URL, 0, FixedChoice(index))
            if "Firefox" in user_agent or "Version/" in user_agent:
                assert "Sec-CH-UA" not in headers
            else:
                assert headers["Sec-CH-UA"] == hints
                assert headers["Sec-CH-UA-Mobile"] == "?0"

    def test_platform_hint_matches_user_agent(self):
        headers = build_headers(URL, 0, FixedChoice(1))
        assert "Macintosh" in headers["User-Agent"]
        assert headers["Sec-CH-UA-Platform"] == '"macOS"'

    def test_origin_of(self):
        assert origin_of("http://example.com:8080/a/b") == "http://example.com:8080"
