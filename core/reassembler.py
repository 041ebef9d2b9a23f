"""Reassembly of (possibly enhanced) segments into one text."""

from __future__ import annotations

from typing import Iterable, List

from modules.types import Segment

__all__ = ["reassemble_segments"]


def reassemble_segments(segments: Iterable[Segment]) -> str:
    """
    Merge segments back into a single text, dropping the shared overlap.

    Segments are ordered by start offset. Each segment after the first loses
    as many leading characters as its range overlaps the previous one in the
    original text. When the capability changed a segment's length, this
    original-offset trim is an approximation of the true duplicated span.

    Args:
        segments: Segments produced by ``core.segmenter.segment_content``,
            with ``text`` optionally replaced by enhanced text

    Returns:
        The merged text ("" for no segments).
    """
    ordered: List[Segment] = sorted(segments, key=lambda s: s.start)
    if not ordered:
        return ""

    parts = [ordered[0].text]
    running_end = ordered[0].end

    for segment in ordered[1:]:
        overlap = max(0, running_end - segment.start)
        parts.append(segment.text[overlap:] if overlap > 0 else segment.text)
        running_end = max(running_end, segment.end)

    return "".join(parts)
