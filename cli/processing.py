"""Single-file run of one feature (enhance, summarize, analyze, suggestions) used by the CLI."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from api.enhancement_api import EnhancementClient
from api.llm_client import get_available_providers, get_provider_for_model, is_provider_available
from api.model_catalog import get_model_catalog
from api.rate_limiter import RateLimiterStore
from core.orchestrator import Capability, EnhancementOrchestrator
from modules import app_config as config
from modules.cancellation import CancellationToken
from modules.config_loader import get_config_loader
from modules.constants import DEFAULT_FEATURE
from modules.content_detector import ContentAnalysis, analyze_content
from modules.error_handler import ConfigurationError, ValidationError
from modules.logger import setup_logger
from modules.prompt_utils import build_instructions, resolve_website_id
from modules.types import EnhancementOutcome, ModelDescriptor

logger = setup_logger(__name__)

# Output file stem suffix per feature
OUTPUT_SUFFIXES = {
    "enhance": "enhanced",
    "summarize": "summary",
    "analyze": "analysis",
    "suggestions": "suggestions",
}


@dataclass
class RunResult:
    """What the CLI needs to report about one run."""
    outcome: EnhancementOutcome
    input_path: Path
    output_path: Optional[Path] = None
    model: Optional[ModelDescriptor] = None
    provider: Optional[str] = None
    content_type: Optional[str] = None
    feature_type: str = DEFAULT_FEATURE
    analysis: Optional[ContentAnalysis] = None


def resolve_output_path(
    input_path: Path, output: Optional[str], feature_type: str = DEFAULT_FEATURE
) -> Path:
    if output:
        return Path(output).expanduser().resolve()
    suffix = input_path.suffix or ".txt"
    label = OUTPUT_SUFFIXES.get(feature_type, feature_type)
    return input_path.with_name(f"{input_path.stem}_{label}{suffix}")


def read_content(path: Path) -> str:
    """Read the input file as UTF-8 text."""
    if not path.is_file():
        raise ValidationError(f"Input file not found: {path}")
    return path.read_text(encoding="utf-8")


def resolve_model(model_id: str, provider: Optional[str]) -> tuple[ModelDescriptor, str]:
    """
    Look the model up in the catalog and decide which provider serves it.

    Raises:
        ConfigurationError: Unknown model
    """
    if provider is None and model_id == config.MODEL:
        provider = config.PROVIDER
    model = get_model_catalog().get(model_id, provider)
    return model, provider or get_provider_for_model(model.id)


def ensure_provider_available(provider: str) -> None:
    """
    Fail before any work when the provider's API key is missing.

    Raises:
        ConfigurationError: No API key for ``provider`` in the environment
    """
    if is_provider_available(provider):
        return
    available = get_available_providers()
    raise ConfigurationError(
        f"No API key set for provider '{provider}'. "
        f"Providers with keys: {', '.join(available) if available else 'none'}"
    )


async def run_enhancement(
    args: argparse.Namespace,
    capability: Optional[Capability] = None,
    rate_limiter: Optional[RateLimiterStore] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> RunResult:
    """
    Run ``args.feature`` on the file named by ``args.input`` and write the result.

    Configuration and input problems are returned as failed outcomes, the
    same way the orchestrator reports its own failures.
    """
    input_path = Path(args.input).expanduser().resolve()
    feature_type = args.feature

    try:
        settings = config.get_feature_settings(feature_type)
        content = read_content(input_path)
        model, provider = resolve_model(args.model or settings["model"], args.provider)
        if capability is None:
            ensure_provider_available(provider)
    except (ValidationError, ConfigurationError) as e:
        logger.error(f"Cannot start '{feature_type}': {e}")
        return RunResult(
            outcome=EnhancementOutcome.failed(e), input_path=input_path, feature_type=feature_type
        )

    website_id = resolve_website_id(args.url)
    analysis = analyze_content(content, args.url, args.title, known_site=website_id is not None)
    content_type = args.content_type or analysis.content_type

    segmentation = get_config_loader().get_segmentation_config()
    instructions = build_instructions(
        content_type=content_type,
        website_id=website_id,
        novel_title=args.title if content_type == "novel" and args.title else None,
        custom_prompt=args.custom_prompt,
        include_formatting=bool(segmentation.get("preserve_formatting", True)),
        feature_type=feature_type,
    )
    logger.info(
        f"Running '{feature_type}' on {input_path.name} as '{content_type}' with {provider}:{model.id}"
    )

    orchestrator = EnhancementOrchestrator.from_config(
        capability or EnhancementClient(provider=provider),
        provider,
        rate_limiter=rate_limiter,
        max_chunk_size=args.max_chunk_size,
        overlap_size=args.overlap_size,
        preserve_media=False if args.no_media else None,
        rate_limiting_enabled=False if args.no_rate_limit else None,
        temperature=args.temperature if args.temperature is not None else settings["temperature"],
        max_output_tokens=settings["max_output_tokens"],
        show_progress=config.SHOW_PROGRESS and not args.no_progress,
    )
    outcome = await orchestrator.enhance(
        content, model, instructions, cancel_token=cancel_token, feature_type=feature_type
    )

    result = RunResult(
        outcome=outcome,
        input_path=input_path,
        model=model,
        provider=provider,
        content_type=content_type,
        feature_type=feature_type,
        analysis=analysis,
    )
    if outcome.success and outcome.merged_text is not None:
        output_path = resolve_output_path(input_path, args.output, feature_type)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(outcome.merged_text, encoding="utf-8")
        logger.info(f"Output written to {output_path}")
        result.output_path = output_path
    return result


__all__ = [
    "OUTPUT_SUFFIXES",
    "RunResult",
    "resolve_output_path",
    "read_content",
    "resolve_model",
    "ensure_provider_available",
    "run_enhancement",
]
