"""Centralized error classes and reporting utilities.

The enhancement pipeline surfaces exactly one terminal error per run. This
module defines that error taxonomy, a coarse classifier for opaque provider
exceptions, and the helpers the CLI uses to report failures consistently.
"""

from __future__ import annotations

import sys
from typing import Any

from modules.logger import setup_logger
from modules.user_prompts import print_error

logger = setup_logger(__name__)


# ============================================================================
# Error Classification
# ============================================================================
class EnhancementError(Exception):
    """Base exception for enhancement pipeline errors."""

    error_type = "enhancement"


class ValidationError(EnhancementError):
    """Content or options were rejected before any external call was made."""

    error_type = "validation"


class ConfigurationError(EnhancementError):
    """Exception for configuration-related errors."""

    error_type = "configuration"


class CapabilityError(EnhancementError):
    """The external enhancement call failed (network, auth, quota, malformed output)."""

    error_type = "capability"

    def __init__(self, message: str, category: str = "unknown") -> None:
        super().__init__(message)
        self.category = category


class EnhancementCancelled(EnhancementError):
    """The run was cancelled through its cancellation token."""

    error_type = "cancelled"


# Substrings checked against the exception type name and message, in order
_CATEGORY_MARKERS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("auth", ("authentication", "unauthorized", "permission", "401", "403", "api key", "api_key")),
    ("quota", ("ratelimit", "rate limit", "rate_limit", "429", "quota", "resource_exhausted", "overloaded")),
    ("network", ("timeout", "timed out", "connection", "network", "unreachable")),
    ("malformed", ("decode", "malformed", "invalid json", "empty content", "parse")),
)


def classify_provider_error(error: BaseException) -> str:
    """
    Map an opaque provider exception to a coarse failure category.

    Returns one of ``auth``, ``quota``, ``network``, ``malformed`` or ``unknown``.
    Provider-side throttling lands in ``quota`` and is treated as fatal like
    every other category.
    """
    haystack = f"{type(error).__name__} {error}".lower()
    for category, markers in _CATEGORY_MARKERS:
        if any(marker in haystack for marker in markers):
            return category
    return "unknown"


# ============================================================================
# Error Handlers
# ============================================================================
def handle_critical_error(
    error: Exception,
    context: str,
    exit_on_error: bool = False,
    show_user_message: bool = True,
) -> None:
    """Log a critical error with traceback and optionally tell the user and exit."""
    logger.exception(f"Critical error in {context}: {error}")

    if show_user_message:
        print_error(f"Critical error: {context} failed. Check logs for details.")

    if exit_on_error:
        sys.exit(1)


# ============================================================================
# Validation Helpers
# ============================================================================
def validate_config_value(
    value: Any,
    expected_type: type | tuple[type, ...],
    name: str,
    allow_none: bool = False,
) -> None:
    """Validate a configuration value, raising ConfigurationError on type mismatch."""
    if value is None and allow_none:
        return

    # bool is an int subclass; never accept it where a number is expected
    if isinstance(value, bool) and expected_type in (int, float, (int, float)):
        raise ConfigurationError(
            f"Invalid configuration for '{name}': expected a number, got bool"
        )

    if not isinstance(value, expected_type):
        expected = (
            expected_type.__name__
            if isinstance(expected_type, type)
            else " or ".join(t.__name__ for t in expected_type)
        )
        raise ConfigurationError(
            f"Invalid configuration for '{name}': expected {expected}, "
            f"got {type(value).__name__}"
        )


# ============================================================================
# Public API
# ============================================================================
__all__ = [
    "EnhancementError",
    "ValidationError",
    "ConfigurationError",
    "CapabilityError",
    "EnhancementCancelled",
    "classify_provider_error",
    "handle_critical_error",
    "validate_config_value",
]
