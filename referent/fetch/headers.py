"""
Browser-like request header profiles.

Each attempt gets a full navigation header set built around a user agent
drawn from a fixed pool. The first attempt looks like direct navigation to
the target; retries look like a click-through from a search results page.
"""

import random
from typing import Dict, Optional, Tuple
from urllib.parse import urlparse

SEARCH_REFERER = "https://www.google.com/"

# (user agent, client hints) - client hints only for Chromium browsers
USER_AGENTS: Tuple[Tuple[str, Optional[str]], ...] = (
    (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
        '"Google Chrome";v="131", "Chromium";v="131", "Not_A Brand";v="24"',
    ),
    (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/130.0.0.0 Safari/537.36",
        '"Chromium";v="130", "Google Chrome";v="130", "Not?A_Brand";v="99"',
    ),
    (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36 Edg/131.0.0.0",
        '"Microsoft Edge";v="131", "Chromium";v="131", "Not_A Brand";v="24"',
    ),
    (
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/129.0.0.0 Safari/537.36",
        '"Google Chrome";v="129", "Not=A?Brand";v="8", "Chromium";v="129"',
    ),
    (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:133.0) Gecko/20100101 Firefox/133.0",
        None,
    ),
    (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 14.7; rv:132.0) Gecko/20100101 Firefox/132.0",
        None,
    ),
    (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
        "(KHTML, like Gecko) Version/18.1 Safari/605.1.15",
        None,
    ),
)

_PLATFORMS = {
    "Windows": '"Windows"',
    "Macintosh": '"macOS"',
    "Linux": '"Linux"',
}


def _platform_hint(user_agent: str) -> str:
    for marker, platform in _PLATFORMS.items():
        if marker in user_agent:
            return platform
    return '"Unknown"'


def origin_of(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def build_headers(url: str, attempt_index: int, rng: random.Random) -> Dict[str, str]:
    """
    Build the header profile for one fetch attempt.

    The result depends only on the arguments: pass a seeded ``rng`` to get a
    reproducible profile sequence.
    """
    user_agent, client_hints = rng.choice(USER_AGENTS)

    headers = {
        "User-Agent": user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
        "Accept-Encoding": "gzip, deflate, br",
        "DNT": "1",
        "Connection": "keep-alive",
        "Upgrade-Insecure-Requests": "1",
        "Sec-Fetch-Dest": "document",
        "Sec-Fetch-Mode": "navigate",
        "Sec-Fetch-User": "?1",
        "Cache-Control": "max-age=0",
    }

    if client_hints:
        headers["Sec-CH-UA"] = client_hints
        headers["Sec-CH-UA-Mobile"] = "?0"
        headers["Sec-CH-UA-Platform"] = _platform_hint(user_agent)

    if attempt_index == 0:
        origin = origin_of(url)
        headers["Sec-Fetch-Site"] = "none"
        headers["Referer"] = origin
        headers["Origin"] = origin
    else:
        headers["Sec-Fetch-Site"] = "cross-site"
        headers["Referer"] = SEARCH_REFERER

    return headers
