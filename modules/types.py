"""Type definitions and data structures for NovelSynth.

Dataclasses for the values flowing through the enhancement pipeline:
content to split, segments and their embedded media, per-model rate budgets,
capability responses and the single terminal outcome of a run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from modules.constants import (
    DEFAULT_MAX_CHUNK_SIZE,
    DEFAULT_OVERLAP_SIZE,
)
from modules.error_handler import ValidationError


# ============================================================================
# Content and Segmentation
# ============================================================================
@dataclass(frozen=True)
class SegmentationOptions:
    """Options controlling how oversized content is split."""
    max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE
    overlap_size: int = DEFAULT_OVERLAP_SIZE
    preserve_media: bool = True
    preserve_formatting: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.max_chunk_size, bool) or not isinstance(self.max_chunk_size, int):
            raise ValidationError(
                f"max_chunk_size must be an integer, got {type(self.max_chunk_size).__name__}"
            )
        if isinstance(self.overlap_size, bool) or not isinstance(self.overlap_size, int):
            raise ValidationError(
                f"overlap_size must be an integer, got {type(self.overlap_size).__name__}"
            )
        if self.max_chunk_size < 1:
            raise ValidationError(f"max_chunk_size must be >= 1, got {self.max_chunk_size}")
        if self.overlap_size < 0:
            raise ValidationError(f"overlap_size must be >= 0, got {self.overlap_size}")

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> SegmentationOptions:
        """Create options from a segmentation configuration dictionary."""
        max_chunk = config.get("max_chunk_size")
        return cls(
            max_chunk_size=DEFAULT_MAX_CHUNK_SIZE if max_chunk is None else max_chunk,
            overlap_size=config.get("overlap_size", DEFAULT_OVERLAP_SIZE),
            preserve_media=bool(config.get("preserve_media", True)),
            preserve_formatting=bool(config.get("preserve_formatting", True)),
        )


@dataclass(frozen=True)
class ContentUnit:
    """Raw text to enhance together with the options used to split it."""
    text: str
    options: SegmentationOptions = field(default_factory=SegmentationOptions)

    @property
    def max_chunk_size(self) -> int:
        return self.options.max_chunk_size

    @property
    def overlap_size(self) -> int:
        return self.options.overlap_size

    @property
    def preserve_media(self) -> bool:
        return self.options.preserve_media

    @property
    def preserve_formatting(self) -> bool:
        return self.options.preserve_formatting


@dataclass(frozen=True)
class MediaReference:
    """One embedded media element found in the content before splitting.

    Attributes:
        index: Occurrence number, also used to build the placeholder token
        src: Source locator of the element
        markup: Original serialized tag, restored verbatim
        offset: Character offset of the tag in the original text
        label: Alternative text (falls back to the title attribute)
        title: Title attribute, when present
    """
    index: int
    src: str
    markup: str
    offset: int
    label: Optional[str] = None
    title: Optional[str] = None

    @property
    def end_offset(self) -> int:
        return self.offset + len(self.markup)


@dataclass(frozen=True)
class Segment:
    """A bounded, possibly overlapping slice of the content.

    ``start`` and ``end`` are offsets in the original text; ``text`` has media
    markup restored, so for unmodified segments ``len(text) == end - start``.
    """
    index: int
    text: str
    start: int
    end: int
    media: Tuple[MediaReference, ...] = ()

    @property
    def segment_id(self) -> str:
        return f"segment_{self.index}"

    def __len__(self) -> int:
        return len(self.text)


# ============================================================================
# Models and Rate Budgets
# ============================================================================
@dataclass(frozen=True)
class ModelDescriptor:
    """Static description of a model: context budget and per-minute quotas."""
    id: str
    max_tokens: int
    requests_per_minute: Optional[int] = None
    tokens_per_minute: Optional[int] = None
    name: Optional[str] = None

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> ModelDescriptor:
        """Create a descriptor from a models.yaml entry."""
        rpm = config.get("requests_per_minute")
        tpm = config.get("tokens_per_minute")
        return cls(
            id=str(config["id"]),
            max_tokens=int(config["max_tokens"]),
            requests_per_minute=int(rpm) if rpm else None,
            tokens_per_minute=int(tpm) if tpm else None,
            name=config.get("name"),
        )

    def display_label(self) -> str:
        return f"{self.name or self.id} ({self.max_tokens:,} tokens)"


@dataclass
class RateBudget:
    """Per (provider, model) request and token counters. Times are epoch milliseconds."""
    provider: str
    model: str
    request_count: int = 0
    token_count: int = 0
    last_request: float = 0.0
    next_available_time: float = 0.0


# ============================================================================
# Capability and Outcome
# ============================================================================
@dataclass(frozen=True)
class TokenUsage:
    """Token usage reported by the capability for one call."""
    prompt_tokens: int = 0
    completion_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens


@dataclass(frozen=True)
class CapabilityResponse:
    """Successful response of one enhancement call."""
    text: str
    usage: TokenUsage = field(default_factory=TokenUsage)
    processing_time: float = 0.0


@dataclass(frozen=True)
class EnhancementStats:
    """Word and character statistics of original versus enhanced text."""
    original_words: int
    enhanced_words: int
    words_changed: int
    percentage_change: float
    characters_original: int
    characters_enhanced: int


@dataclass(frozen=True)
class EnhancementOutcome:
    """Terminal outcome of one enhancement run.

    Either ``merged_text`` is set (success) or ``error`` is set (failure);
    a failed outcome never carries any enhanced text.
    """
    merged_text: Optional[str] = None
    processing_time: float = 0.0
    segment_count: int = 0
    stats: Optional[EnhancementStats] = None
    error: Optional[str] = None
    error_type: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def succeeded(
        cls,
        merged_text: str,
        processing_time: float,
        segment_count: int = 1,
        stats: Optional[EnhancementStats] = None,
    ) -> EnhancementOutcome:
        return cls(
            merged_text=merged_text,
            processing_time=processing_time,
            segment_count=segment_count,
            stats=stats,
        )

    @classmethod
    def failed(cls, error: Exception) -> EnhancementOutcome:
        return cls(
            error=str(error) or type(error).__name__,
            error_type=getattr(error, "error_type", "enhancement"),
        )


# ============================================================================
# Public API
# ============================================================================
__all__ = [
    "SegmentationOptions",
    "ContentUnit",
    "MediaReference",
    "Segment",
    "ModelDescriptor",
    "RateBudget",
    "TokenUsage",
    "CapabilityResponse",
    "EnhancementStats",
    "EnhancementOutcome",
]
