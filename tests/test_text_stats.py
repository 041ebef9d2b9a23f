"""Tests for modules/text_stats.py - Word statistics and formatting."""

from __future__ import annotations

import pytest

from modules.text_stats import (
    calculate_stats,
    count_characters,
    count_words,
    estimate_reading_minutes,
    format_percentage_change,
    format_reading_time,
    format_word_count,
)


class TestCounting:
    """Tests for word and character counts."""

    def test_words_ignore_tags(self):
        assert count_words("<p>Hello</p><p>world</p> again") == 3

    def test_empty(self):
        assert count_words("") == 0
        assert count_characters("") == 0

    def test_characters_strip_tags(self):
        assert count_characters("<b>abc</b> d") == 5


class TestCalculateStats:
    """Tests for calculate_stats."""

    def test_growth(self):
        stats = calculate_stats("one two three four", "one two three four five six")

        assert stats.original_words == 4
        assert stats.enhanced_words == 6
        assert stats.words_changed == 2
        assert stats.percentage_change == 50.0

    def test_shrink_is_negative(self):
        stats = calculate_stats("a b c", "a b")

        assert stats.words_changed == -1
        assert stats.percentage_change == -33.33

    def test_empty_original(self):
        stats = calculate_stats("", "something new")
        assert stats.percentage_change == 0

    def test_characters(self):
        stats = calculate_stats("<p>ab</p>", "abc")

        assert stats.characters_original == 2
        assert stats.characters_enhanced == 3


class TestFormatting:
    """Tests for display helpers."""

    @pytest.mark.parametrize(
        "count,expected",
        [(950, "950"), (12345, "12.3K"), (1_200_000, "1.2M"), (-1500, "-1.5K"), (0, "0")],
    )
    def test_format_word_count(self, count, expected):
        assert format_word_count(count) == expected

    @pytest.mark.parametrize("value,expected", [(12.34, "+12.3%"), (-5.0, "-5.0%"), (0, "0.0%")])
    def test_format_percentage_change(self, value, expected):
        assert format_percentage_change(value) == expected

    @pytest.mark.parametrize(
        "words,expected",
        [(50, "< 1 min"), (1000, "5 min"), (12000, "1h"), (13000, "1h 5m")],
    )
    def test_format_reading_time(self, words, expected):
        assert format_reading_time(words) == expected

    def test_estimate_reading_minutes_rounds_up(self):
        assert estimate_reading_minutes(201) == 2
        assert estimate_reading_minutes(0) == 0
