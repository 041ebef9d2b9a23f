"""Centralized constants for NovelSynth.

Single source of truth for the default values used by the segmentation,
rate limiting and orchestration layers.
"""

from __future__ import annotations

# ============================================================================
# API Configuration Defaults
# ============================================================================
DEFAULT_PROVIDER = "openai"
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_OUTPUT_TOKENS = 8192
DEFAULT_API_TIMEOUT = 320
DEFAULT_MAX_RETRIES = 2

# Features routed through the orchestrator; "enhance" rewrites the content,
# the others produce a new text about it
FEATURE_TYPES = ("enhance", "summarize", "analyze", "suggestions")
DEFAULT_FEATURE = "enhance"

# ============================================================================
# Segmentation Defaults
# ============================================================================
DEFAULT_MAX_CHUNK_SIZE = 12000
DEFAULT_OVERLAP_SIZE = 200
SENTENCE_SEARCH_WINDOW = 500
SENTENCE_BREAKS = (". ", "! ", "? ", ".\n", "!\n", "?\n")

# Size check: content longer than max_tokens * 3 characters is segmented
CHARS_PER_TOKEN_THRESHOLD = 3.0
# Segment size derived from the model: max_tokens * 2.5 characters
CHUNK_CHARS_PER_TOKEN = 2.5
# Rough input token estimate used for the local token quota
ESTIMATE_CHARS_PER_TOKEN = 3

# Placeholder delimiters (Unicode private use area, never produced by pages)
MEDIA_PLACEHOLDER_OPEN = "\ue000"
MEDIA_PLACEHOLDER_CLOSE = "\ue001"

# ============================================================================
# Validation
# ============================================================================
MIN_CONTENT_LENGTH = 100

# ============================================================================
# Rate Limiter Constants
# ============================================================================
RATE_WINDOW_MS = 60000

# ============================================================================
# Instruction Constants
# ============================================================================
SEGMENT_NOTE_TEMPLATE = (
    "**Important:** This is part {index} of {total} segments. "
    "Maintain consistency with the overall content style and formatting."
)

# ============================================================================
# Reading Statistics
# ============================================================================
WORDS_PER_MINUTE = 200
LONG_FORM_MIN_WORDS = 500

# ============================================================================
# CLI Constants
# ============================================================================
DIVIDER_CHAR = "─"
DIVIDER_LENGTH = 70

# ============================================================================
# Public API
# ============================================================================
__all__ = [
    # API defaults
    "DEFAULT_PROVIDER",
    "DEFAULT_MODEL",
    "DEFAULT_TEMPERATURE",
    "DEFAULT_MAX_OUTPUT_TOKENS",
    "DEFAULT_API_TIMEOUT",
    "DEFAULT_MAX_RETRIES",
    "FEATURE_TYPES",
    "DEFAULT_FEATURE",
    # Segmentation
    "DEFAULT_MAX_CHUNK_SIZE",
    "DEFAULT_OVERLAP_SIZE",
    "SENTENCE_SEARCH_WINDOW",
    "SENTENCE_BREAKS",
    "CHARS_PER_TOKEN_THRESHOLD",
    "CHUNK_CHARS_PER_TOKEN",
    "ESTIMATE_CHARS_PER_TOKEN",
    "MEDIA_PLACEHOLDER_OPEN",
    "MEDIA_PLACEHOLDER_CLOSE",
    # Validation
    "MIN_CONTENT_LENGTH",
    # Rate limiter
    "RATE_WINDOW_MS",
    # Instructions
    "SEGMENT_NOTE_TEMPLATE",
    # Reading statistics
    "WORDS_PER_MINUTE",
    "LONG_FORM_MIN_WORDS",
    # CLI
    "DIVIDER_CHAR",
    "DIVIDER_LENGTH",
]
