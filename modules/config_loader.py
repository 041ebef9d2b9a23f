"""Configuration loader for YAML-based settings.

Loads the YAML configuration files residing under ``modules/config/`` and
gives dictionary access to their contents.

Supported Configuration Files:
1. **segmentation.yaml**: chunk size, overlap, media/formatting preservation
   and the characters-per-token heuristics used for the size check
2. **models.yaml**: model descriptors per provider (context size and
   per-minute request/token quotas)

Prompt templates live in ``modules/prompts/`` and are loaded by
``modules.prompt_utils``; the application settings in ``app.yaml`` are exposed
as constants by ``modules.app_config``.

Usage Pattern:
    >>> from modules.config_loader import get_config_loader
    >>> loader = get_config_loader()
    >>> seg_config = loader.get_segmentation_config()
    >>> models = loader.get_models_config()

Missing files or invalid YAML produce empty dictionaries and a logged
warning; callers fall back to the defaults in ``modules.constants``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from modules.logger import setup_logger

logger = setup_logger(__name__)

# ============================================================================
# Path Resolution
# ============================================================================
PROJECT_ROOT = Path(__file__).resolve().parents[1]
MODULES_DIR = Path(__file__).resolve().parent
CONFIG_DIR = MODULES_DIR / "config"
PROMPTS_DIR = MODULES_DIR / "prompts"


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML mapping from disk.

    Returns an empty dictionary when the file is missing, unreadable, not
    valid YAML, or does not contain a mapping at the top level.
    """
    if not path.exists():
        logger.debug(f"Config file not found: {path}")
        return {}

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"YAML parsing error in {path.name}: {e}")
        return {}
    except OSError as e:
        logger.error(f"Error reading config {path.name}: {e}")
        return {}

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Config file {path.name} did not contain a dictionary. Using empty config.")
        return {}
    return data


# ============================================================================
# Configuration Loader Class
# ============================================================================
class ConfigLoader:
    """
    Lightweight loader for the segmentation and model catalog configs.

    Example:
        >>> loader = ConfigLoader()
        >>> loader.load_configs()
        >>> loader.get_segmentation_config().get("overlap_size")
        200
    """

    def __init__(self, config_dir: Path | None = None) -> None:
        self.config_dir = config_dir or CONFIG_DIR
        self._segmentation: dict[str, Any] = {}
        self._models: dict[str, Any] = {}

    def load_configs(self) -> None:
        """Load segmentation.yaml and models.yaml; errors are logged, never raised."""
        self._segmentation = load_yaml_file(self.config_dir / "segmentation.yaml")
        self._models = load_yaml_file(self.config_dir / "models.yaml")

    def get_segmentation_config(self) -> dict[str, Any]:
        """Get the segmentation configuration."""
        return dict(self._segmentation)

    def get_models_config(self) -> dict[str, Any]:
        """Get the model catalog, keyed by provider."""
        return dict(self._models)

    def is_loaded(self) -> bool:
        """Check if any configuration has been loaded."""
        return bool(self._segmentation or self._models)


# ============================================================================
# Singleton Pattern for Config Loader
# ============================================================================
_config_loader_instance: ConfigLoader | None = None


def get_config_loader() -> ConfigLoader:
    """Get or create a singleton ConfigLoader instance."""
    global _config_loader_instance

    if _config_loader_instance is None:
        _config_loader_instance = ConfigLoader()
        _config_loader_instance.load_configs()
        logger.debug("Initialized singleton ConfigLoader")

    return _config_loader_instance


# ============================================================================
# Public API
# ============================================================================
__all__ = [
    "ConfigLoader",
    "get_config_loader",
    "load_yaml_file",
    "PROJECT_ROOT",
    "MODULES_DIR",
    "CONFIG_DIR",
    "PROMPTS_DIR",
]
