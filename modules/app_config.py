"""Application configuration loaded from modules/config/app.yaml.

Settings are exposed as module-level constants:
- CLI progress display (SHOW_PROGRESS)
- Provider and model selection (PROVIDER, MODEL)
- Call parameters (TEMPERATURE, MAX_OUTPUT_TOKENS, API_TIMEOUT, MAX_RETRIES,
  CALL_TIMEOUT)
- Local rate limiting toggle (RATE_LIMITING_ENABLED)
- Validation threshold (MIN_CONTENT_LENGTH)
- Per-feature model, output budget and temperature (FEATURE_SETTINGS,
  read through get_feature_settings)

Import as:
    from modules import app_config as config

API keys are not stored here; they are resolved from the provider's
environment variable when the chat model is created.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from modules.config_loader import CONFIG_DIR, load_yaml_file
from modules.constants import (
    DEFAULT_API_TIMEOUT,
    DEFAULT_FEATURE,
    DEFAULT_MAX_OUTPUT_TOKENS,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MODEL,
    DEFAULT_PROVIDER,
    DEFAULT_TEMPERATURE,
    FEATURE_TYPES,
    MIN_CONTENT_LENGTH as DEFAULT_MIN_CONTENT_LENGTH,
)
from modules.error_handler import ConfigurationError, validate_config_value
from modules.logger import setup_logger

logger = setup_logger(__name__)

_APP_CONFIG_PATH: Path = CONFIG_DIR / "app.yaml"


# ============================================================================
# Value Helpers
# ============================================================================
def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def _get_str(data: Dict[str, Any], key: str, default: str) -> str:
    """Safely get a string value from config dictionary."""
    value = data.get(key, default)
    return str(value) if value is not None else default


def _get_int(data: Dict[str, Any], key: str, default: int) -> int:
    """Safely get an integer value from config dictionary."""
    try:
        return int(data.get(key, default))
    except (ValueError, TypeError):
        logger.warning(f"Invalid integer for '{key}', using default: {default}")
        return default


def _get_float(data: Dict[str, Any], key: str, default: float) -> float:
    """Safely get a float value from config dictionary."""
    try:
        return float(data.get(key, default))
    except (ValueError, TypeError):
        logger.warning(f"Invalid number for '{key}', using default: {default}")
        return default


def _get_optional_float(data: Dict[str, Any], key: str) -> Optional[float]:
    value = data.get(key)
    if value is None:
        return None
    try:
        parsed = float(value)
    except (ValueError, TypeError):
        logger.warning(f"Invalid number for '{key}', disabling it")
        return None
    return parsed if parsed > 0 else None


def _get_bool(data: Dict[str, Any], key: str, default: bool) -> bool:
    """Safely get a boolean value from config dictionary."""
    return bool(data.get(key, default))


# ============================================================================
# Configuration Values (loaded at module import)
# ============================================================================
_APP_CFG: Dict[str, Any] = load_yaml_file(_APP_CONFIG_PATH)
if not _APP_CFG:
    logger.warning(f"App config not found or empty: {_APP_CONFIG_PATH}. Using defaults.")

_RATE: Dict[str, Any] = _section(_APP_CFG, "rate_limiting")
_VALIDATION: Dict[str, Any] = _section(_APP_CFG, "validation")

# --- CLI ---
SHOW_PROGRESS = _get_bool(_APP_CFG, "show_progress", True)

# --- Provider / Model ---
PROVIDER = _get_str(_APP_CFG, "provider", DEFAULT_PROVIDER)
MODEL = _get_str(_APP_CFG, "model", DEFAULT_MODEL)

# --- Call Parameters ---
TEMPERATURE = _get_float(_APP_CFG, "temperature", DEFAULT_TEMPERATURE)
MAX_OUTPUT_TOKENS = _get_int(_APP_CFG, "max_output_tokens", DEFAULT_MAX_OUTPUT_TOKENS)
API_TIMEOUT = _get_int(_APP_CFG, "api_timeout", DEFAULT_API_TIMEOUT)
MAX_RETRIES = _get_int(_APP_CFG, "max_retries", DEFAULT_MAX_RETRIES)
CALL_TIMEOUT = _get_optional_float(_APP_CFG, "call_timeout")

# --- Rate Limiting ---
RATE_LIMITING_ENABLED = _get_bool(_RATE, "enabled", True)

# --- Validation ---
MIN_CONTENT_LENGTH = _get_int(_VALIDATION, "min_content_length", DEFAULT_MIN_CONTENT_LENGTH)

logger.debug(
    f"Configuration loaded: SHOW_PROGRESS={SHOW_PROGRESS}, PROVIDER={PROVIDER}, MODEL={MODEL}, "
    f"RATE_LIMITING_ENABLED={RATE_LIMITING_ENABLED}"
)


# ============================================================================
# Per-Feature Settings
# ============================================================================
_FEATURE_KEY_TYPES: Dict[str, Any] = {
    "model": str,
    "max_output_tokens": int,
    "temperature": (int, float),
}


def _load_feature_settings(section: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    """Merge each feature's overrides over the top-level settings; invalid values are skipped."""
    settings: Dict[str, Dict[str, Any]] = {}
    for feature in FEATURE_TYPES:
        merged: Dict[str, Any] = {
            "model": MODEL,
            "max_output_tokens": MAX_OUTPUT_TOKENS,
            "temperature": TEMPERATURE,
        }
        overrides = _section(section, feature)
        for key, expected in _FEATURE_KEY_TYPES.items():
            if key not in overrides:
                continue
            try:
                validate_config_value(overrides[key], expected, f"features.{feature}.{key}")
            except ConfigurationError as e:
                logger.warning(f"{e}; using {merged[key]!r}")
                continue
            merged[key] = overrides[key]
        settings[feature] = merged
    return settings


FEATURE_SETTINGS: Dict[str, Dict[str, Any]] = _load_feature_settings(_section(_APP_CFG, "features"))


def get_feature_settings(feature_type: str = DEFAULT_FEATURE) -> Dict[str, Any]:
    """
    Return ``model``, ``max_output_tokens`` and ``temperature`` for a feature.

    Raises:
        ConfigurationError: Unknown feature
    """
    if feature_type not in FEATURE_SETTINGS:
        raise ConfigurationError(
            f"Unknown feature '{feature_type}' (expected one of: {', '.join(FEATURE_TYPES)})"
        )
    return dict(FEATURE_SETTINGS[feature_type])
