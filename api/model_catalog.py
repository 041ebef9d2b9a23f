"""Model descriptor catalog.

Descriptors (context size and per-minute quotas) come from
``modules/config/models.yaml``; a provider listed there replaces the
built-in entries for that provider. Built-ins keep the CLI usable when the
file is missing.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from modules.config_loader import get_config_loader
from modules.error_handler import ConfigurationError
from modules.logger import setup_logger
from modules.types import ModelDescriptor

logger = setup_logger(__name__)

_BUILTIN_MODELS: Dict[str, List[Dict[str, Any]]] = {
    "openai": [
        {"id": "gpt-4o-mini", "name": "GPT-4o mini", "max_tokens": 128000,
         "requests_per_minute": 500, "tokens_per_minute": 200000},
        {"id": "gpt-4o", "name": "GPT-4o", "max_tokens": 128000,
         "requests_per_minute": 500, "tokens_per_minute": 30000},
        {"id": "gpt-3.5-turbo", "name": "GPT-3.5 Turbo", "max_tokens": 16384,
         "requests_per_minute": 3500, "tokens_per_minute": 200000},
    ],
    "anthropic": [
        {"id": "claude-3-5-sonnet-latest", "name": "Claude 3.5 Sonnet", "max_tokens": 200000,
         "requests_per_minute": 50, "tokens_per_minute": 40000},
    ],
    "google": [
        {"id": "gemini-1.5-pro", "name": "Gemini 1.5 Pro", "max_tokens": 2097152,
         "requests_per_minute": 2, "tokens_per_minute": 32000},
        {"id": "gemini-1.5-flash", "name": "Gemini 1.5 Flash", "max_tokens": 1048576,
         "requests_per_minute": 15, "tokens_per_minute": 1000000},
    ],
    "openrouter": [
        {"id": "meta-llama/llama-3.2-3b-instruct:free", "name": "Llama 3.2 3B (free)",
         "max_tokens": 131072, "requests_per_minute": 20},
    ],
}


def _parse_entries(provider: str, entries: Any) -> List[ModelDescriptor]:
    if not isinstance(entries, list):
        logger.warning(f"Model list for provider '{provider}' is not a list; ignoring it")
        return []
    descriptors: List[ModelDescriptor] = []
    for entry in entries:
        try:
            descriptors.append(ModelDescriptor.from_dict(entry))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Skipping invalid model entry for '{provider}': {entry!r} ({e})")
    return descriptors


class ModelCatalog:
    """Lookup of model descriptors by provider and id."""

    def __init__(self, models_config: Optional[Dict[str, Any]] = None) -> None:
        self._models: Dict[str, List[ModelDescriptor]] = {
            provider: _parse_entries(provider, entries)
            for provider, entries in _BUILTIN_MODELS.items()
        }
        for provider, entries in (models_config or {}).items():
            parsed = _parse_entries(str(provider), entries)
            if parsed:
                self._models[str(provider)] = parsed

    def providers(self) -> List[str]:
        return list(self._models)

    def list_models(self, provider: Optional[str] = None) -> List[ModelDescriptor]:
        if provider is not None:
            return list(self._models.get(provider, []))
        return [m for models in self._models.values() for m in models]

    def get(self, model_id: str, provider: Optional[str] = None) -> ModelDescriptor:
        """
        Find the descriptor for ``model_id``.

        A ``provider:`` prefix on the id is honoured when it names a known
        provider. Without a provider every provider is searched in order.

        Raises:
            ConfigurationError: The model is not in the catalog
        """
        if ":" in model_id:
            prefix, rest = model_id.split(":", 1)
            if prefix in self._models:
                provider, model_id = provider or prefix, rest

        candidates = self.list_models(provider) if provider else self.list_models()
        for descriptor in candidates:
            if descriptor.id == model_id:
                return descriptor

        where = f" for provider '{provider}'" if provider else ""
        raise ConfigurationError(
            f"Unknown model '{model_id}'{where}. Add it to modules/config/models.yaml."
        )


_catalog_instance: Optional[ModelCatalog] = None


def get_model_catalog() -> ModelCatalog:
    """Get or create the catalog built from the loaded models.yaml."""
    global _catalog_instance
    if _catalog_instance is None:
        _catalog_instance = ModelCatalog(get_config_loader().get_models_config())
        logger.debug(f"Model catalog loaded for providers: {_catalog_instance.providers()}")
    return _catalog_instance


__all__ = ["ModelCatalog", "get_model_catalog"]
