"""Core package for NovelSynth.

This package provides the enhancement pipeline:

- **segmenter**: sentence-aware splitting with media preservation
- **reassembler**: overlap-aware merging of enhanced segments
- **orchestrator**: EnhancementOrchestrator driving rate-limited capability calls
"""

from core.orchestrator import Capability, EnhancementOrchestrator
from core.reassembler import reassemble_segments
from core.segmenter import extract_media, segment_content

__all__ = [
    "Capability",
    "EnhancementOrchestrator",
    "reassemble_segments",
    "segment_content",
    "extract_media",
]
