"""
Heuristic article extraction.

Title, publication date and body are located by three independent cascades
of CSS selector rules. Each cascade walks its rules in declaration order and
stops at the first rule that yields a non-empty value. New heuristics are
added by editing the rule tables, not the control flow.
"""

import copy
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional, Union

from bs4 import BeautifulSoup, Tag

from referent.core.config import settings

logger = logging.getLogger(__name__)

TITLE_NOT_FOUND = "title not found"
DATE_NOT_FOUND = "date not found"
CONTENT_NOT_FOUND = "content not found"

_WHITESPACE_RE = re.compile(r"\s+")


class RuleMode(str, Enum):
    ATTRIBUTE_CONTENT = "attribute-content"
    TEXT = "text"
    DATETIME_OR_TEXT = "datetime-or-text"


@dataclass(frozen=True)
class SelectorRule:
    selector: str
    mode: RuleMode


@dataclass(frozen=True)
class ExtractionResult:
    title: str
    published_at: str
    body: str


TITLE_RULES = (
    SelectorRule("h1", RuleMode.TEXT),
    SelectorRule("article h1", RuleMode.TEXT),
    SelectorRule(".post-title", RuleMode.TEXT),
    SelectorRule(".article-title", RuleMode.TEXT),
    SelectorRule(".entry-title", RuleMode.TEXT),
    SelectorRule('[class*="title"]', RuleMode.TEXT),
    SelectorRule('meta[property="og:title"]', RuleMode.ATTRIBUTE_CONTENT),
    SelectorRule('meta[name="title"]', RuleMode.ATTRIBUTE_CONTENT),
)

DATE_RULES = (
    SelectorRule("time[datetime]", RuleMode.DATETIME_OR_TEXT),
    SelectorRule("time", RuleMode.DATETIME_OR_TEXT),
    SelectorRule('[class*="date"]', RuleMode.DATETIME_OR_TEXT),
    SelectorRule('[class*="published"]', RuleMode.DATETIME_OR_TEXT),
    SelectorRule('[class*="time"]', RuleMode.DATETIME_OR_TEXT),
    SelectorRule('meta[property="article:published_time"]', RuleMode.ATTRIBUTE_CONTENT),
    SelectorRule('meta[name="date"]', RuleMode.ATTRIBUTE_CONTENT),
    SelectorRule('[itemprop="datePublished"]', RuleMode.DATETIME_OR_TEXT),
)

CONTENT_SELECTORS = (
    "article",
    ".post",
    ".content",
    ".article-content",
    ".entry-content",
    ".post-content",
    '[class*="article"]',
    '[class*="content"]',
    "main",
    '[role="article"]',
)

# Noise removed from content candidates before measuring them
CANDIDATE_NOISE = "script, style, nav, aside, .ad, .advertisement, .sidebar"
ARTICLE_NOISE = "script, style, nav, aside"
BODY_NOISE = "script, style, nav, header, footer, aside"


def normalize_whitespace(text: str) -> str:
    """Collapse every whitespace run to a single space and trim the ends."""
    return _WHITESPACE_RE.sub(" ", text or "").strip()


def first_match(rules: Iterable, evaluate: Callable) -> Optional[str]:
    """Return the first non-empty value produced by ``evaluate`` over ``rules``."""
    for rule in rules:
        value = evaluate(rule)
        if value:
            return value
    return None


def _read_rule(soup: BeautifulSoup, rule: SelectorRule) -> Optional[str]:
    element = soup.select_one(rule.selector)
    if element is None:
        return None

    if rule.mode is RuleMode.ATTRIBUTE_CONTENT:
        value = element.get("content") or ""
    elif rule.mode is RuleMode.DATETIME_OR_TEXT:
        value = (
            (element.get("datetime") or "").strip()
            or (element.get("content") or "").strip()
            or element.get_text()
        )
    else:
        value = element.get_text()

    return value.strip() or None


def _stripped_copy(element: Tag, noise: str) -> Tag:
    working = copy.copy(element)
    for junk in working.select(noise):
        junk.decompose()
    return working


def _content_candidate(soup: BeautifulSoup, selector: str, min_length: int) -> Optional[str]:
    element = soup.select_one(selector)
    if element is None:
        return None
    working = _stripped_copy(element, CANDIDATE_NOISE)
    if len(working.get_text().strip()) > min_length:
        return normalize_whitespace(working.get_text(" "))
    return None


def extract_title(soup: BeautifulSoup) -> str:
    return first_match(TITLE_RULES, lambda rule: _read_rule(soup, rule)) or TITLE_NOT_FOUND


def extract_date(soup: BeautifulSoup) -> str:
    return first_match(DATE_RULES, lambda rule: _read_rule(soup, rule)) or DATE_NOT_FOUND


def extract_content(soup: BeautifulSoup, min_length: Optional[int] = None) -> str:
    """
    Locate the main body text.

    Falls back to the first ``article`` of any length, then to the whole
    document body, when no candidate passes the length gate.
    """
    if min_length is None:
        min_length = settings.CONTENT_MIN_LENGTH

    content = first_match(
        CONTENT_SELECTORS, lambda selector: _content_candidate(soup, selector, min_length)
    )

    if not content:
        article = soup.find("article")
        if article is not None:
            logger.debug("No content candidate passed the length gate, using first <article>")
            content = normalize_whitespace(_stripped_copy(article, ARTICLE_NOISE).get_text(" "))

    if not content:
        logger.debug("Falling back to whole document body")
        body = soup.body
        if body is not None:
            content = normalize_whitespace(_stripped_copy(body, BODY_NOISE).get_text(" "))
        else:
            content = normalize_whitespace(_stripped_copy(soup, BODY_NOISE + ", head, title").get_text(" "))

    return content or CONTENT_NOT_FOUND


def extract(html: Union[bytes, str]) -> ExtractionResult:
    """
    Extract title, publication date and body text from raw HTML.

    Never raises: any field that cannot be found is returned as its
    "not found" sentinel.
    """
    if not html:
        return ExtractionResult(TITLE_NOT_FOUND, DATE_NOT_FOUND, CONTENT_NOT_FOUND)

    try:
        soup = BeautifulSoup(html, "html.parser")
    except Exception as e:
        logger.warning("HTML could not be parsed: %s", e)
        return ExtractionResult(TITLE_NOT_FOUND, DATE_NOT_FOUND, CONTENT_NOT_FOUND)

    result = ExtractionResult(
        title=extract_title(soup),
        published_at=extract_date(soup),
        body=extract_content(soup),
    )

    if result.title == TITLE_NOT_FOUND:
        logger.info("Title cascade exhausted")
    if result.published_at == DATE_NOT_FOUND:
        logger.info("Date cascade exhausted")
    if result.body == CONTENT_NOT_FOUND:
        logger.info("Content cascade and fallbacks exhausted")

    return result
