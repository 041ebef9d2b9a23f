"""Content-type classification from URL, title and text.

Used by the CLI when no ``--content-type`` is given. Detection is a cascade
of keyword checks; the first matching rule wins and ``generic`` is the
fallback.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from modules.constants import LONG_FORM_MIN_WORDS
from modules.logger import setup_logger
from modules.text_stats import count_words, estimate_reading_minutes

logger = setup_logger(__name__)

_CHAPTER_TITLE = re.compile(r"chapter\s+\d+", re.IGNORECASE)
_DATED_PATH = re.compile(r"\d{4}/\d{2}/\d{2}")

_NOVEL_URL_MARKERS = ("novel", "chapter", "fanfiction", "webnovel", "royalroad", "archiveofourown")
_NEWS_URL_MARKERS = ("news", "article")
_NEWS_TEXT_MARKERS = ("breaking news", "reuters", "associated press")
_TECHNICAL_URL_MARKERS = ("docs", "documentation", "api", "guide", "geeksforgeeks")
_ARTICLE_URL_MARKERS = ("blog", "post", "tutorial", "howto", "medium.com")
_ARTICLE_TEXT_MARKERS = ("posted by", "written by")
_ARTICLE_TITLE_MARKERS = ("how to", "tutorial")


@dataclass(frozen=True)
class ContentAnalysis:
    """Result of analysing one piece of content."""
    content_type: str
    word_count: int
    reading_time: int
    is_long_form: bool
    confidence: float
    title: Optional[str] = None


def detect_content_type(url: str = "", text: str = "", title: str = "") -> str:
    """
    Classify content as ``novel``, ``news``, ``technical``, ``article`` or ``generic``.

    Args:
        url: Source URL (may be empty)
        text: Content text (only a few marker phrases are checked)
        title: Document title
    """
    lower_url = (url or "").lower()
    lower_title = (title or "").lower()
    lower_text = (text or "").lower()

    if (
        any(marker in lower_url for marker in _NOVEL_URL_MARKERS)
        or "chapter" in lower_title
        or _CHAPTER_TITLE.search(title or "")
    ):
        return "novel"

    if (
        any(marker in lower_url for marker in _NEWS_URL_MARKERS)
        or _DATED_PATH.search(url or "")
        or any(marker in lower_text for marker in _NEWS_TEXT_MARKERS)
    ):
        return "news"

    if any(marker in lower_url for marker in _TECHNICAL_URL_MARKERS) or "documentation" in lower_title:
        return "technical"

    if (
        any(marker in lower_url for marker in _ARTICLE_URL_MARKERS)
        or any(marker in lower_text for marker in _ARTICLE_TEXT_MARKERS)
        or any(marker in lower_title for marker in _ARTICLE_TITLE_MARKERS)
    ):
        return "article"

    return "generic"


def _confidence(known_site: bool, word_count: int, content_type: str) -> float:
    confidence = 0.5
    if known_site:
        confidence += 0.3
    if word_count > 2000:
        confidence += 0.2
    elif word_count > 1000:
        confidence += 0.1
    if content_type != "generic":
        confidence += 0.2
    return min(confidence, 1.0)


def analyze_content(
    text: str, url: str = "", title: str = "", known_site: bool = False
) -> ContentAnalysis:
    """Detect the content type and compute length metrics for ``text``."""
    word_count = count_words(text)
    content_type = detect_content_type(url, text, title)
    analysis = ContentAnalysis(
        content_type=content_type,
        word_count=word_count,
        reading_time=estimate_reading_minutes(word_count),
        is_long_form=word_count >= LONG_FORM_MIN_WORDS,
        confidence=_confidence(known_site, word_count, content_type),
        title=title or None,
    )
    logger.debug(f"Content analysis: type={content_type}, words={word_count}")
    return analysis


__all__ = ["ContentAnalysis", "detect_content_type", "analyze_content"]
