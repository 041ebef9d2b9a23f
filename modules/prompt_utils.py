"""Utilities for composing enhancement instructions from prompt templates.

Instructions are assembled in a fixed order:

1. Base prompt: the custom prompt when given, else the feature template
   (the content-type template for ``enhance``)
2. ``**Website Context:**`` line for the source site, when known
3. ``**Novel Context:**`` line for the work being enhanced, when known
4. Permanent formatting requirements (``enhance`` only, skipped when
   formatting is not preserved)

Segmented runs additionally append the "part K of N" note to each segment's
instructions via :func:`add_segment_note`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import urlparse

from modules.config_loader import PROMPTS_DIR, load_yaml_file
from modules.constants import DEFAULT_FEATURE, FEATURE_TYPES, SEGMENT_NOTE_TEMPLATE
from modules.logger import setup_logger

logger = setup_logger(__name__)

# Public API
__all__ = [
    "CONTENT_TYPES",
    "FEATURE_TYPES",
    "PromptTemplates",
    "load_prompt_templates",
    "resolve_website_id",
    "build_instructions",
    "add_segment_note",
]

CONTENT_TYPES = ("novel", "article", "news", "technical", "generic")

PROMPTS_FILE = PROMPTS_DIR / "enhancement_prompts.yaml"
_FALLBACK_BASE_PROMPT = (
    "Please enhance this content while preserving its meaning, facts and structure."
)


@dataclass(frozen=True)
class PromptTemplates:
    """Prompt text loaded from ``enhancement_prompts.yaml``."""
    content_types: Dict[str, str] = field(default_factory=dict)
    websites: Dict[str, str] = field(default_factory=dict)
    features: Dict[str, str] = field(default_factory=dict)
    novel_default: str = ""
    permanent: str = ""

    def base_prompt(self, content_type: str) -> str:
        """Return the template for ``content_type``, falling back to ``generic``."""
        return (
            self.content_types.get(content_type)
            or self.content_types.get("generic")
            or _FALLBACK_BASE_PROMPT
        )

    def website_prompt(self, website_id: str) -> str:
        return self.websites.get(website_id) or self.websites.get("generic", "")

    def feature_prompt(self, feature_type: str, content_type: str) -> str:
        """Base prompt for ``feature_type``; ``enhance`` and unknown features use the content type."""
        if feature_type != DEFAULT_FEATURE and self.features.get(feature_type):
            return self.features[feature_type]
        return self.base_prompt(content_type)


def _string_map(value: object) -> Dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(k): str(v).strip() for k, v in value.items() if v}


_templates_cache: Dict[Path, PromptTemplates] = {}


def load_prompt_templates(path: Optional[Path] = None) -> PromptTemplates:
    """
    Load (and cache) the prompt templates.

    A missing or invalid file yields empty templates and a warning; the
    instruction builder then falls back to a minimal generic prompt.
    """
    target = path or PROMPTS_FILE
    cached = _templates_cache.get(target)
    if cached is not None:
        return cached

    data = load_yaml_file(target)
    if not data:
        logger.warning(f"Prompt templates not found or empty: {target}")

    templates = PromptTemplates(
        content_types=_string_map(data.get("content_types")),
        websites=_string_map(data.get("websites")),
        features=_string_map(data.get("features")),
        novel_default=str(data.get("novel_default") or "").strip(),
        permanent=str(data.get("permanent") or "").strip(),
    )
    _templates_cache[target] = templates
    return templates


def resolve_website_id(url: Optional[str], templates: Optional[PromptTemplates] = None) -> Optional[str]:
    """
    Map a page URL to a known website id (its domain key in the templates).

    Returns:
        The matching domain key, or None when the URL is empty or unknown.
    """
    if not url:
        return None
    host = (urlparse(url).hostname or "").lower()
    if not host:
        return None
    known = (templates or load_prompt_templates()).websites
    for domain in known:
        if domain != "generic" and (host == domain or host.endswith("." + domain)):
            return domain
    return None


def build_instructions(
    content_type: str = "generic",
    website_id: Optional[str] = None,
    novel_title: Optional[str] = None,
    novel_context: Optional[str] = None,
    custom_prompt: Optional[str] = None,
    include_formatting: bool = True,
    templates: Optional[PromptTemplates] = None,
    feature_type: str = DEFAULT_FEATURE,
) -> str:
    """
    Compose the instructions for one run of ``feature_type``.

    Args:
        content_type: One of ``CONTENT_TYPES``; unknown types use ``generic``
        website_id: Source site key; unknown ids use the generic site prompt
        novel_title: Title of the work, used with the default novel context
        novel_context: Explicit novel notes (take precedence over the title)
        custom_prompt: Replaces the feature template when non-empty
        include_formatting: Append the permanent formatting requirements
        templates: Templates to use instead of the packaged file
        feature_type: One of ``FEATURE_TYPES``; formatting requirements apply to ``enhance`` only

    Returns:
        The composed instruction text.
    """
    tpl = templates or load_prompt_templates()

    if custom_prompt and custom_prompt.strip():
        base = custom_prompt.strip()
    else:
        base = tpl.feature_prompt(feature_type, content_type)
    parts = [base]

    if website_id:
        website_prompt = tpl.website_prompt(website_id)
        if website_prompt:
            parts.append(f"\n**Website Context:** {website_prompt}")

    novel_prompt = ""
    if novel_context and novel_context.strip():
        novel_prompt = novel_context.strip()
    elif novel_title and tpl.novel_default:
        novel_prompt = tpl.novel_default.replace("{title}", novel_title)
    if novel_prompt:
        parts.append(f"\n**Novel Context:** {novel_prompt}")

    if include_formatting and feature_type == DEFAULT_FEATURE and tpl.permanent:
        parts.append(f"\n{tpl.permanent}")

    return "\n".join(parts)


def add_segment_note(instructions: str, part: int, total: int) -> str:
    """Append the "part ``part`` of ``total``" consistency note (``part`` is 1-based)."""
    return f"{instructions}\n\n{SEGMENT_NOTE_TEMPLATE.format(index=part, total=total)}"
