from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Union
from urllib.parse import urlparse

ALLOWED_SCHEMES = ("http", "https")


class InvalidURLError(ValueError):
    """Raised when a URL is not an absolute http(s) address."""


class FailureKind(str, Enum):
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    HTTP_ERROR = "http_error"
    TIMEOUT = "timeout"
    UNREACHABLE = "unreachable"
    EMPTY_BODY = "empty_body"

    @property
    def retryable(self) -> bool:
        return self in (FailureKind.FORBIDDEN, FailureKind.TIMEOUT)


@dataclass(frozen=True)
class FetchRequest:
    url: str

    def __post_init__(self):
        if not isinstance(self.url, str) or not self.url.strip():
            raise InvalidURLError("URL is required")
        parsed = urlparse(self.url.strip())
        if parsed.scheme.lower() not in ALLOWED_SCHEMES:
            raise InvalidURLError("Only HTTP and HTTPS URLs are supported")
        if not parsed.netloc or not parsed.hostname:
            raise InvalidURLError("Invalid URL format")
        object.__setattr__(self, "url", self.url.strip())


@dataclass(frozen=True)
class FetchAttempt:
    attempt_index: int
    headers: Dict[str, str] = field(repr=False)
    deadline: float  # monotonic clock instant


@dataclass(frozen=True)
class FetchSuccess:
    html: bytes = field(repr=False)
    status_code: int
    final_url: str
    attempts: int


@dataclass(frozen=True)
class FetchFailure:
    kind: FailureKind
    status_code: Optional[int]
    attempts: int


FetchOutcome = Union[FetchSuccess, FetchFailure]


class BaseFetcher:
    async def fetch(self, request: Union[FetchRequest, str]) -> FetchOutcome:
        raise NotImplementedError
