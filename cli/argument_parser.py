"""CLI argument parsing."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from modules import app_config as config
from modules.constants import DEFAULT_FEATURE, FEATURE_TYPES
from modules.prompt_utils import CONTENT_TYPES
from api.llm_client import SUPPORTED_PROVIDERS


def _positive_int(value: str) -> int:
    """Argparse type validator for positive integers."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be an integer") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be > 0")
    return parsed


def _non_negative_int(value: str) -> int:
    """Argparse type validator for integers >= 0."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be an integer") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("must be >= 0")
    return parsed


def _temperature(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be a number") from exc
    if not 0.0 <= parsed <= 2.0:
        raise argparse.ArgumentTypeError("must be between 0 and 2")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Enhance, summarize, analyze or get suggestions for long-form text "
            "(novel chapters, articles, documentation) with an LLM"
        ),
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "input",
        type=str,
        help="Path to the text or HTML file to enhance.",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Where to write the result. Defaults to '<input stem>_<feature label><suffix>' next to the input, e.g. chapter_enhanced.html.",
    )

    parser.add_argument(
        "--feature",
        choices=FEATURE_TYPES,
        default=DEFAULT_FEATURE,
        help="What to produce: the enhanced text, a summary, an analysis or reading suggestions.",
    )

    # Model selection
    parser.add_argument(
        "--provider",
        choices=sorted(SUPPORTED_PROVIDERS),
        default=None,
        help=f"LLM provider. Inferred from the model when omitted (configured: {config.PROVIDER}).",
    )
    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help=f"Model id from modules/config/models.yaml. Defaults to the feature's model in app.yaml (enhance: {config.MODEL}).",
    )
    parser.add_argument(
        "--temperature",
        type=_temperature,
        default=None,
        help=f"Sampling temperature. Defaults to the feature's temperature in app.yaml (enhance: {config.TEMPERATURE}).",
    )

    # Instructions
    parser.add_argument(
        "--content-type",
        choices=CONTENT_TYPES,
        default=None,
        help="Content type used to pick the instruction template. Detected from URL/title/text when omitted.",
    )
    parser.add_argument("--url", type=str, default="", help="Source URL, used for detection and website context.")
    parser.add_argument("--title", type=str, default="", help="Document title (novel title for novel context).")
    parser.add_argument(
        "--custom-prompt",
        type=str,
        default=None,
        help="Replace the feature (or content-type) instructions with this text.",
    )

    # Segmentation
    parser.add_argument(
        "--max-chunk-size",
        type=_positive_int,
        default=None,
        help="Segment size in characters. Derived from the model's context size when omitted.",
    )
    parser.add_argument(
        "--overlap-size",
        type=_non_negative_int,
        default=None,
        help="Characters shared between neighbouring segments.",
    )
    parser.add_argument(
        "--no-media",
        action="store_true",
        help="Do not protect <img> tags when segmenting.",
    )
    parser.add_argument(
        "--no-rate-limit",
        action="store_true",
        help="Disable local request/token rate limiting.",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Hide the segment progress bar.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show info-level log output on the console.",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Append the detailed run log (rate-limit waits, segment timings, failures) to this file.",
    )
    return parser


def setup_argparse(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


__all__ = ["build_parser", "setup_argparse"]
