"""Sequential enhancement orchestration.

Drives one enhancement run: validation, the size check that selects the
direct or segmented path, rate-limited capability calls, reassembly and the
single terminal :class:`EnhancementOutcome`.

Segmented runs are strictly sequential and fail fast: the first failed
segment aborts the run and no partial text is returned.

Every feature (enhance, summarize, analyze, suggestions) takes the same
rate-limited path. Enhanced segments are position-aligned with the input and
are merged by trimming their overlap; the other features produce new text per
segment, which is joined in order.
"""

from __future__ import annotations

import asyncio
import math
import time
from dataclasses import replace
from typing import Any, Dict, List, Optional, Protocol, Tuple, Union

from tqdm import tqdm

from api.rate_limiter import RateLimiterStore, get_default_store
from core.reassembler import reassemble_segments
from core.segmenter import segment_content
from modules import app_config as config
from modules.cancellation import CancellationToken, run_cancellable
from modules.config_loader import get_config_loader
from modules.constants import (
    CHARS_PER_TOKEN_THRESHOLD,
    CHUNK_CHARS_PER_TOKEN,
    DEFAULT_FEATURE,
    DEFAULT_OVERLAP_SIZE,
    ESTIMATE_CHARS_PER_TOKEN,
    FEATURE_TYPES,
)
from modules.error_handler import (
    CapabilityError,
    EnhancementError,
    ValidationError,
    classify_provider_error,
)
from modules.logger import setup_logger
from modules.prompt_utils import add_segment_note
from modules.text_stats import calculate_stats
from modules.types import (
    CapabilityResponse,
    ContentUnit,
    EnhancementOutcome,
    ModelDescriptor,
    Segment,
    SegmentationOptions,
)

logger = setup_logger(__name__)


class Capability(Protocol):
    """External generative text capability."""

    async def enhance(
        self,
        text: str,
        instructions: str,
        model: ModelDescriptor,
        max_tokens: int,
        temperature: float,
    ) -> CapabilityResponse:
        ...


class EnhancementOrchestrator:
    """
    Enhance content through a capability, segmenting it when it is too large.

    Args:
        capability: Object implementing :class:`Capability`
        provider: Provider name used to key rate budgets
        rate_limiter: Budget store (defaults to the process-wide store)
        max_chunk_size: Segment size; None derives it from the model
        overlap_size: Characters shared by neighbouring segments
        preserve_media: Keep embedded media intact across segment boundaries
        rate_limiting_enabled: Wait for the local budget before each call
        min_content_length: Minimum stripped length accepted for enhancement
        temperature: Sampling temperature passed to the capability
        max_output_tokens: Output token limit passed to the capability
        call_timeout: Seconds allowed per capability call (None for no limit)
        show_progress: Show a tqdm progress bar over segments
    """

    def __init__(
        self,
        capability: Capability,
        provider: str,
        rate_limiter: Optional[RateLimiterStore] = None,
        max_chunk_size: Optional[int] = None,
        overlap_size: int = DEFAULT_OVERLAP_SIZE,
        preserve_media: bool = True,
        rate_limiting_enabled: bool = True,
        min_content_length: int = config.MIN_CONTENT_LENGTH,
        temperature: float = config.TEMPERATURE,
        max_output_tokens: int = config.MAX_OUTPUT_TOKENS,
        call_timeout: Optional[float] = None,
        show_progress: bool = False,
        chars_per_token_threshold: float = CHARS_PER_TOKEN_THRESHOLD,
        chunk_chars_per_token: float = CHUNK_CHARS_PER_TOKEN,
    ) -> None:
        self.capability = capability
        self.provider = provider
        self.rate_limiter = rate_limiter or get_default_store()
        self.max_chunk_size = max_chunk_size
        self.overlap_size = overlap_size
        self.preserve_media = preserve_media
        self.rate_limiting_enabled = rate_limiting_enabled
        self.min_content_length = min_content_length
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.call_timeout = call_timeout
        self.show_progress = show_progress
        self.chars_per_token_threshold = chars_per_token_threshold
        self.chunk_chars_per_token = chunk_chars_per_token

    @classmethod
    def from_config(
        cls,
        capability: Capability,
        provider: str,
        rate_limiter: Optional[RateLimiterStore] = None,
        **overrides: Any,
    ) -> EnhancementOrchestrator:
        """Build an orchestrator from app.yaml and segmentation.yaml, then apply overrides."""
        seg: Dict[str, Any] = get_config_loader().get_segmentation_config()
        settings: Dict[str, Any] = {
            "max_chunk_size": seg.get("max_chunk_size"),
            "overlap_size": seg.get("overlap_size", DEFAULT_OVERLAP_SIZE),
            "preserve_media": bool(seg.get("preserve_media", True)),
            "rate_limiting_enabled": config.RATE_LIMITING_ENABLED,
            "min_content_length": config.MIN_CONTENT_LENGTH,
            "temperature": config.TEMPERATURE,
            "max_output_tokens": config.MAX_OUTPUT_TOKENS,
            "call_timeout": config.CALL_TIMEOUT,
            "chars_per_token_threshold": float(
                seg.get("chars_per_token_threshold", CHARS_PER_TOKEN_THRESHOLD)
            ),
            "chunk_chars_per_token": float(seg.get("chunk_chars_per_token", CHUNK_CHARS_PER_TOKEN)),
        }
        settings.update({k: v for k, v in overrides.items() if v is not None})
        return cls(capability, provider, rate_limiter=rate_limiter, **settings)

    # ------------------------------------------------------------------
    # Size check
    # ------------------------------------------------------------------
    def needs_segmentation(self, content: str, model: ModelDescriptor) -> bool:
        """Content longer than ``max_tokens * 3`` characters is segmented."""
        return len(content) > model.max_tokens * self.chars_per_token_threshold

    def segmentation_options(self, model: ModelDescriptor) -> SegmentationOptions:
        max_chunk = self.max_chunk_size or math.floor(model.max_tokens * self.chunk_chars_per_token)
        return SegmentationOptions(
            max_chunk_size=max(1, max_chunk),
            overlap_size=self.overlap_size,
            preserve_media=self.preserve_media,
        )

    def prepare_unit(self, content: Union[str, ContentUnit], model: ModelDescriptor) -> ContentUnit:
        """Wrap raw text with the options derived for ``model``; units pass through unchanged."""
        if isinstance(content, ContentUnit):
            return content
        return ContentUnit(text=content, options=self.segmentation_options(model))

    def estimate_tokens(self, text: str, instructions: str) -> int:
        """Input estimate plus the output allowance, checked against the token quota."""
        return (len(text) + len(instructions)) // ESTIMATE_CHARS_PER_TOKEN + self.max_output_tokens

    def _validate(self, content: str, feature_type: str) -> None:
        if feature_type not in FEATURE_TYPES:
            raise ValidationError(
                f"Unknown feature '{feature_type}' (expected one of: {', '.join(FEATURE_TYPES)})"
            )
        if not content or not content.strip():
            raise ValidationError("No content to enhance")
        stripped = len(content.strip())
        if stripped < self.min_content_length:
            raise ValidationError(
                f"Content too short to enhance ({stripped} characters, "
                f"minimum {self.min_content_length})"
            )

    # ------------------------------------------------------------------
    # Capability call
    # ------------------------------------------------------------------
    async def _call(
        self,
        text: str,
        instructions: str,
        model: ModelDescriptor,
        cancel_token: Optional[CancellationToken],
    ) -> Tuple[str, float]:
        """Wait for budget, call the capability once and record usage."""
        if self.rate_limiting_enabled:
            await self.rate_limiter.wait_for_rate_limit(
                self.provider,
                model,
                estimated_tokens=self.estimate_tokens(text, instructions),
                cancel_token=cancel_token,
            )

        call = self.capability.enhance(
            text, instructions, model, self.max_output_tokens, self.temperature
        )
        if self.call_timeout:
            call = asyncio.wait_for(call, timeout=self.call_timeout)

        start = time.perf_counter()
        try:
            response = await run_cancellable(call, cancel_token)
        except EnhancementError:
            raise
        except asyncio.TimeoutError as e:
            if not self.call_timeout:
                raise CapabilityError(
                    f"{type(e).__name__}: {e}", category=classify_provider_error(e)
                ) from e
            raise CapabilityError(
                f"Enhancement call timed out after {self.call_timeout}s", category="network"
            ) from e
        except Exception as e:
            raise CapabilityError(
                f"{type(e).__name__}: {e}", category=classify_provider_error(e)
            ) from e
        elapsed = time.perf_counter() - start

        self.rate_limiter.record_request(self.provider, model, response.usage.total_tokens)
        return response.text, elapsed

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------
    async def _enhance_direct(
        self,
        unit: ContentUnit,
        instructions: str,
        model: ModelDescriptor,
        cancel_token: Optional[CancellationToken],
        feature_type: str,
    ) -> Tuple[str, float, int]:
        logger.info(f"Running '{feature_type}' on {len(unit.text)} chars in a single request ({model.id})")
        text, elapsed = await self._call(unit.text, instructions, model, cancel_token)
        return text, elapsed, 1

    async def _enhance_segmented(
        self,
        unit: ContentUnit,
        instructions: str,
        model: ModelDescriptor,
        cancel_token: Optional[CancellationToken],
        feature_type: str,
    ) -> Tuple[str, float, int]:
        segments = segment_content(unit.text, unit.options)
        total = len(segments)
        logger.info(
            f"Content too large for a single request; running '{feature_type}' "
            f"over {total} segments ({model.id})"
        )

        results: List[Optional[Segment]] = [None] * total
        total_time = 0.0

        progress = tqdm(total=total, desc="Processing segments", unit="segment", disable=not self.show_progress)
        try:
            for segment in segments:
                if cancel_token is not None:
                    cancel_token.raise_if_cancelled()

                part = segment.index + 1
                logger.info(f"Processing segment {part}/{total} ({len(segment)} chars)")
                try:
                    text, elapsed = await self._call(
                        segment.text,
                        add_segment_note(instructions, part, total),
                        model,
                        cancel_token,
                    )
                except CapabilityError as e:
                    logger.error(f"Segment {part}/{total} failed: {e}")
                    raise CapabilityError(
                        f"Segment {part} of {total} failed: {e}", category=e.category
                    ) from e

                total_time += elapsed
                results[segment.index] = replace(segment, text=text)
                progress.update(1)
        finally:
            progress.close()

        done = [s for s in results if s is not None]
        if feature_type == DEFAULT_FEATURE:
            merged = reassemble_segments(done)
        else:
            merged = "\n\n".join(s.text.strip() for s in done)
        return merged, total_time, total

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------
    async def enhance(
        self,
        content: Union[str, ContentUnit],
        model: ModelDescriptor,
        instructions: str,
        cancel_token: Optional[CancellationToken] = None,
        feature_type: str = DEFAULT_FEATURE,
    ) -> EnhancementOutcome:
        """
        Run ``feature_type`` over ``content`` and return the run's single outcome.

        ``content`` is raw text or a :class:`ContentUnit`; a unit's own
        segmentation options replace the ones derived from ``model``.

        Never raises for pipeline failures: validation, configuration,
        capability and cancellation errors become a failed outcome carrying
        no text.
        """
        try:
            unit = self.prepare_unit(content, model)
            self._validate(unit.text, feature_type)
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()

            if self.needs_segmentation(unit.text, model):
                merged, elapsed, count = await self._enhance_segmented(
                    unit, instructions, model, cancel_token, feature_type
                )
            else:
                merged, elapsed, count = await self._enhance_direct(
                    unit, instructions, model, cancel_token, feature_type
                )
        except EnhancementError as e:
            logger.error(f"'{feature_type}' run failed ({e.error_type}): {e}")
            return EnhancementOutcome.failed(e)

        logger.info(f"'{feature_type}' complete: {count} request(s), {elapsed:.2f}s")
        return EnhancementOutcome.succeeded(
            merged_text=merged,
            processing_time=elapsed,
            segment_count=count,
            stats=calculate_stats(unit.text, merged),
        )


__all__ = ["Capability", "EnhancementOrchestrator"]
