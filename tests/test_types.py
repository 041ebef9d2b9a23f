"""Tests for modules/types.py - Type definitions and data structures."""

from __future__ import annotations

import pytest

from modules.error_handler import CapabilityError, ValidationError
from modules.types import (
    ContentUnit,
    EnhancementOutcome,
    EnhancementStats,
    MediaReference,
    ModelDescriptor,
    RateBudget,
    Segment,
    SegmentationOptions,
    TokenUsage,
)


class TestSegmentationOptions:
    """Tests for SegmentationOptions."""

    def test_defaults(self):
        opts = SegmentationOptions()

        assert opts.max_chunk_size == 12000
        assert opts.overlap_size == 200
        assert opts.preserve_media is True

    def test_zero_overlap_allowed(self):
        assert SegmentationOptions(overlap_size=0).overlap_size == 0

    def test_non_integer_rejected(self):
        with pytest.raises(ValidationError, match="max_chunk_size must be an integer"):
            SegmentationOptions(max_chunk_size=12.5)  # type: ignore[arg-type]

    def test_content_unit_exposes_options(self):
        unit = ContentUnit("text", SegmentationOptions(max_chunk_size=50, overlap_size=5))

        assert unit.max_chunk_size == 50
        assert unit.overlap_size == 5
        assert unit.preserve_formatting is True


class TestSegmentAndMedia:
    """Tests for Segment and MediaReference."""

    def test_segment_id_and_len(self):
        segment = Segment(index=3, text="abc", start=10, end=13)

        assert segment.segment_id == "segment_3"
        assert len(segment) == 3
        assert segment.media == ()

    def test_media_end_offset(self):
        ref = MediaReference(index=0, src="a.png", markup='<img src="a.png">', offset=5)
        assert ref.end_offset == 5 + len('<img src="a.png">')


class TestModelDescriptor:
    """Tests for ModelDescriptor."""

    def test_from_dict(self):
        descriptor = ModelDescriptor.from_dict(
            {"id": "m", "max_tokens": "4000", "requests_per_minute": 60, "name": "Model M"}
        )

        assert descriptor.max_tokens == 4000
        assert descriptor.requests_per_minute == 60
        assert descriptor.tokens_per_minute is None

    def test_zero_quota_means_unlimited(self):
        descriptor = ModelDescriptor.from_dict({"id": "m", "max_tokens": 1, "tokens_per_minute": 0})
        assert descriptor.tokens_per_minute is None

    def test_display_label(self):
        assert ModelDescriptor("m", 128000, name="Big").display_label() == "Big (128,000 tokens)"

    def test_budget_defaults(self):
        budget = RateBudget(provider="openai", model="m")

        assert budget.request_count == 0
        assert budget.next_available_time == 0.0


class TestEnhancementOutcome:
    """Tests for EnhancementOutcome."""

    def test_succeeded(self):
        stats = EnhancementStats(10, 12, 2, 20.0, 50, 60)
        outcome = EnhancementOutcome.succeeded("text", 1.5, segment_count=2, stats=stats)

        assert outcome.success is True
        assert outcome.merged_text == "text"
        assert outcome.segment_count == 2
        assert outcome.error is None

    def test_failed_carries_no_text(self):
        outcome = EnhancementOutcome.failed(CapabilityError("boom", category="network"))

        assert outcome.success is False
        assert outcome.merged_text is None
        assert outcome.error == "boom"
        assert outcome.error_type == "capability"

    def test_failed_with_plain_exception(self):
        outcome = EnhancementOutcome.failed(RuntimeError())

        assert outcome.error == "RuntimeError"
        assert outcome.error_type == "enhancement"

    def test_token_usage_total(self):
        assert TokenUsage(3, 4).total_tokens == 7
