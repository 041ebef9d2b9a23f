"""Sentence-aware content segmentation with media preservation.

Oversized content is split into overlapping segments that each fit the
model's input budget:

1. ``<img>`` tags are replaced by short placeholder tokens so a split can
   never bisect a tag and tag length never counts against a window.
2. The placeholder text is walked in ``max_chunk_size`` windows; each window
   is cut after the last sentence terminator found within the final 500
   characters, or hard-cut when there is none.
3. The next segment starts ``overlap_size`` characters before the cut, which
   gives the model a little shared context between neighbours.
4. Placeholders are restored per segment and offsets are reported in
   original-text coordinates, so ``core.reassembler`` can trim the overlap.

Usage:
    >>> from core.segmenter import segment_content
    >>> from modules.types import SegmentationOptions
    >>> segments = segment_content(text, SegmentationOptions(max_chunk_size=12000))
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from modules.constants import (
    MEDIA_PLACEHOLDER_CLOSE,
    MEDIA_PLACEHOLDER_OPEN,
    SENTENCE_BREAKS,
    SENTENCE_SEARCH_WINDOW,
)
from modules.logger import setup_logger
from modules.types import MediaReference, Segment, SegmentationOptions

logger = setup_logger(__name__)

# Public API
__all__ = ["segment_content", "extract_media", "find_last_sentence_break", "media_placeholder"]

_IMG_TAG_PATTERN = re.compile(r"<img[^>]*>", re.IGNORECASE)
_SRC_PATTERN = re.compile(r"""src=["']([^"']*)["']""", re.IGNORECASE)
_ALT_PATTERN = re.compile(r"""alt=["']([^"']*)["']""", re.IGNORECASE)
_TITLE_PATTERN = re.compile(r"""title=["']([^"']*)["']""", re.IGNORECASE)


@dataclass(frozen=True)
class _PlaceholderSpan:
    """Position of one placeholder token in the working text."""
    start: int
    end: int
    ref: MediaReference

    @property
    def token(self) -> str:
        return media_placeholder(self.ref.index)


def media_placeholder(index: int) -> str:
    """Return the placeholder token substituted for media occurrence ``index``."""
    return f"{MEDIA_PLACEHOLDER_OPEN}MEDIA_{index}{MEDIA_PLACEHOLDER_CLOSE}"


def _attribute(pattern: re.Pattern[str], tag: str) -> Optional[str]:
    match = pattern.search(tag)
    return match.group(1) if match else None


def extract_media(content: str) -> List[MediaReference]:
    """
    Find every ``<img>`` tag that carries a ``src`` attribute.

    Tags without ``src`` are left in the text as ordinary characters.

    Args:
        content: Raw (HTML) content

    Returns:
        Media references in document order, indexed from 0.
    """
    references: List[MediaReference] = []
    for match in _IMG_TAG_PATTERN.finditer(content):
        tag = match.group(0)
        src = _attribute(_SRC_PATTERN, tag)
        if src is None:
            continue
        alt = _attribute(_ALT_PATTERN, tag)
        title = _attribute(_TITLE_PATTERN, tag)
        references.append(
            MediaReference(
                index=len(references),
                src=src,
                markup=tag,
                offset=match.start(),
                label=alt if alt is not None else title,
                title=title,
            )
        )
    return references


def find_last_sentence_break(content: str, start: int, end: int) -> int:
    """
    Locate the last sentence boundary in ``content[start:end]``.

    A boundary is a terminal ``.``, ``!`` or ``?`` followed by a space or a
    newline; the returned offset points just past that whitespace.

    Returns:
        Absolute offset of the boundary, or ``end`` when none is found.
    """
    window = content[start:end]
    best = -1
    for marker in SENTENCE_BREAKS:
        idx = window.rfind(marker)
        if idx != -1:
            best = max(best, idx + len(marker))
    return start + best if best > -1 else end


def _substitute_placeholders(
    content: str, references: Sequence[MediaReference]
) -> Tuple[str, List[_PlaceholderSpan]]:
    """Replace each referenced tag by its placeholder, recording token positions."""
    parts: List[str] = []
    spans: List[_PlaceholderSpan] = []
    cursor = 0
    length = 0
    for ref in references:
        before = content[cursor:ref.offset]
        parts.append(before)
        length += len(before)
        token = media_placeholder(ref.index)
        parts.append(token)
        spans.append(_PlaceholderSpan(length, length + len(token), ref))
        length += len(token)
        cursor = ref.end_offset
    parts.append(content[cursor:])
    return "".join(parts), spans


def _cut_outside_placeholder(cut: int, start: int, spans: Sequence[_PlaceholderSpan]) -> int:
    """Move a cut that falls inside a placeholder to the token's start (or end)."""
    for span in spans:
        if span.start < cut < span.end:
            return span.start if span.start > start else span.end
    return cut


def _start_outside_placeholders(
    next_start: int, cut: int, spans: Sequence[_PlaceholderSpan]
) -> int:
    """Pull the next start forward so the shared region holds no placeholder."""
    for span in spans:
        if span.start < cut and span.end > next_start:
            next_start = max(next_start, span.end)
    return next_start


def _split_by_size(
    text: str,
    max_size: int,
    overlap_size: int,
    spans: Sequence[_PlaceholderSpan] = (),
) -> List[Tuple[int, int]]:
    """Compute ``(start, end)`` ranges over ``text`` with sentence-aware cuts."""
    ranges: List[Tuple[int, int]] = []
    total = len(text)
    start = 0

    while start < total:
        window_end = min(start + max_size, total)
        cut = window_end

        if window_end < total:
            search_start = max(start, window_end - SENTENCE_SEARCH_WINDOW)
            boundary = find_last_sentence_break(text, search_start, window_end)
            if boundary > start:
                cut = boundary
            cut = _cut_outside_placeholder(cut, start, spans)

        ranges.append((start, cut))
        if cut >= total:
            break

        next_start = max(start + 1, cut - overlap_size)
        start = _start_outside_placeholders(next_start, cut, spans)

    return ranges


def _to_original_offset(offset: int, spans: Sequence[_PlaceholderSpan]) -> int:
    """Translate a working-text offset (never inside a token) to the original text."""
    shift = 0
    for span in spans:
        if span.end <= offset:
            shift += len(span.ref.markup) - (span.end - span.start)
    return offset + shift


def segment_content(
    content: str, options: SegmentationOptions | None = None
) -> List[Segment]:
    """
    Split content into ordered, overlapping segments.

    Content that already fits in ``max_chunk_size`` is returned as a single
    untouched segment.

    Args:
        content: Raw content to split
        options: Segmentation options (defaults: 12000 chars, 200 overlap,
            media preserved)

    Returns:
        Segments ordered by start offset, with media markup restored and the
        media references each one contains.
    """
    opts = options or SegmentationOptions()
    references = extract_media(content) if opts.preserve_media else []

    if len(content) <= opts.max_chunk_size:
        return [Segment(index=0, text=content, start=0, end=len(content), media=tuple(references))]

    if references:
        working, spans = _substitute_placeholders(content, references)
    else:
        working, spans = content, []

    segments: List[Segment] = []
    for index, (start, end) in enumerate(
        _split_by_size(working, opts.max_chunk_size, opts.overlap_size, spans)
    ):
        text = working[start:end]
        media: List[MediaReference] = []
        for span in spans:
            if start <= span.start and span.end <= end:
                text = text.replace(span.token, span.ref.markup)
                media.append(span.ref)
        segments.append(
            Segment(
                index=index,
                text=text,
                start=_to_original_offset(start, spans),
                end=_to_original_offset(end, spans),
                media=tuple(media),
            )
        )

    logger.debug(
        f"Segmented {len(content)} chars into {len(segments)} segments "
        f"(max_chunk_size={opts.max_chunk_size}, overlap={opts.overlap_size}, "
        f"media={len(references)})"
    )
    return segments
