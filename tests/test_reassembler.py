"""Tests for core/reassembler.py - Overlap-aware merging."""

from __future__ import annotations

from core.reassembler import reassemble_segments
from modules.types import Segment


class TestReassembleSegments:
    """Tests for reassemble_segments."""

    def test_empty_input(self):
        """No segments produce an empty string."""
        assert reassemble_segments([]) == ""

    def test_single_segment(self):
        """A single segment is returned as-is."""
        assert reassemble_segments([Segment(0, "Only text.", 0, 10)]) == "Only text."

    def test_overlap_is_trimmed(self):
        """The leading overlap of later segments is dropped."""
        segments = [
            Segment(0, "abcdef", 0, 6),
            Segment(1, "efghij", 4, 10),
        ]
        assert reassemble_segments(segments) == "abcdefghij"

    def test_adjacent_segments_concatenate(self):
        """Segments without overlap are joined directly."""
        segments = [Segment(0, "Hello ", 0, 6), Segment(1, "world", 6, 11)]
        assert reassemble_segments(segments) == "Hello world"

    def test_sorted_by_start(self):
        """Out-of-order input is merged in start order."""
        segments = [
            Segment(2, "789", 6, 9),
            Segment(0, "0123", 0, 4),
            Segment(1, "3456", 3, 7),
        ]
        assert reassemble_segments(segments) == "0123456789"

    def test_input_list_not_mutated(self):
        """The caller's list keeps its order."""
        segments = [Segment(1, "bc", 1, 3), Segment(0, "ab", 0, 2)]
        reassemble_segments(segments)

        assert [s.index for s in segments] == [1, 0]

    def test_enhanced_text_trimmed_by_original_overlap(self):
        """Trimming uses the original overlap length even when text changed."""
        segments = [
            Segment(0, "FIRST PART", 0, 10),
            Segment(1, "XXnew second part", 8, 20),
        ]
        assert reassemble_segments(segments) == "FIRST PARTnew second part"

    def test_overlap_longer_than_enhanced_text(self):
        """A segment shorter than its overlap contributes nothing."""
        segments = [
            Segment(0, "0123456789", 0, 10),
            Segment(1, "ab", 5, 12),
            Segment(2, "tail", 12, 16),
        ]
        assert reassemble_segments(segments) == "0123456789tail"

    def test_accepts_generator(self):
        """Any iterable of segments is accepted."""
        segments = (s for s in [Segment(0, "ab", 0, 2), Segment(1, "cd", 2, 4)])
        assert reassemble_segments(segments) == "abcd"
