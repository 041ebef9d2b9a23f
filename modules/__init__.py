"""Modules package for NovelSynth.

This package contains shared modules for configuration, logging, types,
error handling, prompt composition and text statistics.
"""

__all__ = [
    "app_config",
    "cancellation",
    "config_loader",
    "constants",
    "content_detector",
    "error_handler",
    "logger",
    "prompt_utils",
    "text_stats",
    "types",
    "user_prompts",
]
