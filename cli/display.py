"""CLI display utilities."""

from __future__ import annotations

from typing import Optional

from cli.processing import RunResult
from modules.text_stats import (
    format_percentage_change,
    format_reading_time,
    format_word_count,
)
from modules.user_prompts import (
    Colors,
    print_dim,
    print_error,
    print_header,
    print_info,
    print_section,
    print_separator,
    print_success,
    print_warning,
)

_ERROR_HINTS = {
    "validation": "Check that the input file contains enough text to enhance.",
    "configuration": "Check modules/config/*.yaml and the provider API key environment variable.",
    "capability": "The model call failed; no partial output was written.",
    "cancelled": "The run was cancelled before completion.",
}

_FEATURE_TITLES = {
    "enhance": "Enhancement",
    "summarize": "Summary",
    "analyze": "Analysis",
    "suggestions": "Suggestions",
}


def display_run_header(
    input_name: str, model_label: str, feature_type: str = "enhance", log_file: Optional[str] = None
) -> None:
    print_header("NOVELSYNTH ENHANCEMENT", f"{input_name} with {model_label}")
    print_dim(f"  - Feature: {feature_type}")
    if log_file:
        print_dim(f"  - Log file: {log_file}")


def display_result(result: RunResult) -> None:
    """Print the summary of a finished run (success or failure)."""
    outcome = result.outcome
    title = _FEATURE_TITLES.get(result.feature_type, "Enhancement")

    if not outcome.success:
        print_section(f"{title} Failed")
        print_error(outcome.error or "Unknown error")
        hint = _ERROR_HINTS.get(outcome.error_type or "")
        if hint:
            print_warning(hint)
        return

    print_section(f"{title} Complete")
    if result.output_path is not None:
        print_success(f"Output written to {result.output_path}")
    if result.model is not None:
        print_info(f"Model: {result.provider}:{result.model.display_label()}")
    if result.content_type:
        print_info(f"Content type: {result.content_type}")
    analysis = result.analysis
    if analysis is not None:
        print_dim(
            f"  - Detected '{analysis.content_type}' ({analysis.confidence:.0%} confidence), "
            f"{format_word_count(analysis.word_count)} words, "
            f"{'long-form' if analysis.is_long_form else 'short-form'}"
        )
    print_info(
        f"Requests: {outcome.segment_count} "
        f"({'segmented' if outcome.segment_count > 1 else 'single request'})"
    )
    print_info(f"Processing time: {outcome.processing_time:.2f}s")

    stats = outcome.stats
    if stats is not None:
        print_separator()
        print(
            f"  Words: {Colors.BOLD}{format_word_count(stats.original_words)}{Colors.ENDC}"
            f" -> {Colors.BOLD}{format_word_count(stats.enhanced_words)}{Colors.ENDC}"
            f" ({format_percentage_change(stats.percentage_change)})"
        )
        print(
            f"  Characters: {stats.characters_original:,} -> {stats.characters_enhanced:,}"
        )
        print(f"  Reading time: {format_reading_time(stats.enhanced_words)}")


__all__ = ["display_run_header", "display_result"]
