"""Word and character statistics for original versus enhanced text."""

from __future__ import annotations

import math
import re

from modules.constants import WORDS_PER_MINUTE
from modules.types import EnhancementStats

# Public API
__all__ = [
    "count_words",
    "count_characters",
    "calculate_stats",
    "estimate_reading_minutes",
    "format_word_count",
    "format_percentage_change",
    "format_reading_time",
]

_TAG_PATTERN = re.compile(r"<[^>]*>")


def count_words(text: str) -> int:
    """Count whitespace-separated words, ignoring HTML tags."""
    if not text:
        return 0
    return len(_TAG_PATTERN.sub(" ", text).split())


def count_characters(text: str) -> int:
    """Count characters with HTML tags removed."""
    if not text:
        return 0
    return len(_TAG_PATTERN.sub("", text))


def calculate_stats(original_text: str, enhanced_text: str) -> EnhancementStats:
    """
    Compare original and enhanced text.

    ``percentage_change`` is relative to the original word count, rounded to
    two decimals, and 0 when the original has no words.
    """
    original_words = count_words(original_text)
    enhanced_words = count_words(enhanced_text)
    words_changed = enhanced_words - original_words
    percentage = (words_changed / original_words) * 100 if original_words > 0 else 0.0

    return EnhancementStats(
        original_words=original_words,
        enhanced_words=enhanced_words,
        words_changed=words_changed,
        percentage_change=round(percentage, 2),
        characters_original=count_characters(original_text),
        characters_enhanced=count_characters(enhanced_text),
    )


def estimate_reading_minutes(word_count: int) -> int:
    return math.ceil(word_count / WORDS_PER_MINUTE) if word_count > 0 else 0


def format_word_count(count: int) -> str:
    """Format a count as ``950``, ``12.3K`` or ``1.2M``."""
    magnitude = abs(count)
    sign = "-" if count < 0 else ""
    if magnitude < 1000:
        return f"{sign}{magnitude}"
    if magnitude < 1_000_000:
        return f"{sign}{magnitude / 1000:.1f}K"
    return f"{sign}{magnitude / 1_000_000:.1f}M"


def format_percentage_change(percentage: float) -> str:
    sign = "+" if percentage > 0 else ""
    return f"{sign}{percentage:.1f}%"


def format_reading_time(word_count: int) -> str:
    """Human readable reading time at the configured words-per-minute rate."""
    minutes = round(word_count / WORDS_PER_MINUTE)
    if minutes < 1:
        return "< 1 min"
    if minutes < 60:
        return f"{minutes} min"
    hours, remaining = divmod(minutes, 60)
    return f"{hours}h {remaining}m" if remaining else f"{hours}h"
