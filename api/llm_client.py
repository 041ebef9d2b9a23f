"""Multi-provider chat model factory using LangChain's unified interface.

Supported providers:

- OpenAI (GPT-4o, GPT-4, GPT-3.5 and o-series models)
- Anthropic (Claude models)
- Google (Gemini models)
- OpenRouter (many vendors behind an OpenAI-compatible API)

Usage:
    >>> from api.llm_client import get_chat_model, LLMConfig
    >>> config = LLMConfig(model="gpt-4o-mini", provider="openai")
    >>> model = get_chat_model(config)
    >>> response = await model.ainvoke([SystemMessage(content="..."), HumanMessage(content="...")])

Provider Detection:
- A "provider:model" string selects the provider explicitly when the prefix
  is a supported provider name (OpenRouter ids such as "...:free" are left alone)
- Vendor-qualified ids ("meta-llama/llama-3.2-3b-instruct") go to OpenRouter
- Otherwise the provider is inferred from the model name prefix
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Literal

from langchain_core.language_models import BaseChatModel

from modules.error_handler import ConfigurationError
from modules.logger import setup_logger

logger = setup_logger(__name__)

# Type alias for supported providers
ProviderType = Literal["openai", "anthropic", "google", "openrouter"]

# Supported providers and their LangChain package requirements
SUPPORTED_PROVIDERS: dict[str, dict[str, Any]] = {
    "openai": {
        "package": "langchain-openai",
        "class": "ChatOpenAI",
        "env_key": "OPENAI_API_KEY",
        "model_prefixes": ["gpt-", "o1", "o3", "o4", "text-"],
    },
    "anthropic": {
        "package": "langchain-anthropic",
        "class": "ChatAnthropic",
        "env_key": "ANTHROPIC_API_KEY",
        "model_prefixes": ["claude-"],
    },
    "google": {
        "package": "langchain-google-genai",
        "class": "ChatGoogleGenerativeAI",
        "env_key": "GOOGLE_API_KEY",
        "model_prefixes": ["gemini-"],
    },
    "openrouter": {
        "package": "langchain-openai",  # OpenAI-compatible API
        "class": "ChatOpenAI",
        "env_key": "OPENROUTER_API_KEY",
        "base_url": "https://openrouter.ai/api/v1",
        "model_prefixes": [],
    },
}


@dataclass
class LLMConfig:
    """Configuration for chat model initialization.

    Attributes:
        model: Model identifier (e.g., "gpt-4o-mini", "claude-3-5-sonnet-latest")
        provider: Provider name; inferred from the model when omitted
        api_key: Optional API key (defaults to the provider's environment variable)
        timeout: Request timeout in seconds
        max_retries: Retry attempts performed by the provider SDK
        temperature: Sampling temperature
        max_tokens: Maximum output tokens
        extra_kwargs: Additional provider-specific parameters
    """
    model: str
    provider: ProviderType | None = None
    api_key: str | None = None
    timeout: int = 320
    max_retries: int = 2
    temperature: float | None = None
    max_tokens: int | None = None
    extra_kwargs: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.provider is None:
            self.provider = _infer_provider(self.model)
            logger.debug(f"Inferred provider '{self.provider}' for model '{self.model}'")


def _split_provider_prefix(model: str) -> tuple[str | None, str]:
    """Split "provider:model" when the prefix names a supported provider."""
    if ":" in model:
        prefix, rest = model.split(":", 1)
        if prefix.lower() in SUPPORTED_PROVIDERS:
            return prefix.lower(), rest
    return None, model


def _infer_provider(model: str) -> ProviderType:
    """Infer the provider from the model name, defaulting to OpenAI."""
    explicit, bare = _split_provider_prefix(model)
    if explicit:
        return explicit  # type: ignore[return-value]

    if "/" in bare:
        return "openrouter"

    model_lower = bare.lower()
    for provider_name, provider_info in SUPPORTED_PROVIDERS.items():
        for prefix in provider_info.get("model_prefixes", []):
            if model_lower.startswith(prefix):
                return provider_name  # type: ignore[return-value]

    logger.warning(f"Could not infer provider for model '{model}', defaulting to 'openai'")
    return "openai"


def _get_api_key(provider: str, config_key: str | None = None) -> str:
    """
    Resolve the API key for a provider.

    Raises:
        ConfigurationError: If neither a configured key nor the environment
            variable is available
    """
    if config_key:
        return config_key

    provider_info = SUPPORTED_PROVIDERS.get(provider, {})
    env_key = provider_info.get("env_key", f"{provider.upper()}_API_KEY")

    api_key = os.environ.get(env_key)
    if not api_key:
        raise ConfigurationError(
            f"API key not found for provider '{provider}'. "
            f"Please set the {env_key} environment variable."
        )
    return api_key


def get_chat_model(config: LLMConfig) -> BaseChatModel:
    """Create a LangChain chat model for the given configuration.

    Raises:
        ConfigurationError: Unsupported provider or missing API key
    """
    provider = config.provider or _infer_provider(config.model)
    if provider not in SUPPORTED_PROVIDERS:
        raise ConfigurationError(f"Unsupported provider: {provider}")

    api_key = _get_api_key(provider, config.api_key)
    _, model_name = _split_provider_prefix(config.model)

    kwargs: dict[str, Any] = {
        "model": model_name,
        "timeout": config.timeout,
        "max_retries": config.max_retries,
    }
    if config.temperature is not None:
        kwargs["temperature"] = config.temperature
    if config.max_tokens is not None:
        kwargs["max_tokens"] = config.max_tokens
    kwargs.update(config.extra_kwargs)

    if provider == "openai":
        return _create_openai_model(api_key, kwargs)
    if provider == "anthropic":
        return _create_anthropic_model(api_key, kwargs)
    if provider == "google":
        return _create_google_model(api_key, kwargs)
    return _create_openrouter_model(api_key, kwargs)


def _create_openai_model(api_key: str, kwargs: dict[str, Any]) -> BaseChatModel:
    from langchain_openai import ChatOpenAI

    kwargs["api_key"] = api_key
    logger.debug(f"Creating OpenAI model: {kwargs.get('model')} (max_retries={kwargs.get('max_retries')})")
    return ChatOpenAI(**kwargs)


def _create_anthropic_model(api_key: str, kwargs: dict[str, Any]) -> BaseChatModel:
    from langchain_anthropic import ChatAnthropic

    kwargs["api_key"] = api_key
    logger.debug(f"Creating Anthropic model: {kwargs.get('model')}")
    return ChatAnthropic(**kwargs)


def _create_google_model(api_key: str, kwargs: dict[str, Any]) -> BaseChatModel:
    """Create a Google Generative AI chat model (uses ``max_output_tokens``)."""
    from langchain_google_genai import ChatGoogleGenerativeAI

    kwargs["google_api_key"] = api_key
    if "max_tokens" in kwargs:
        kwargs["max_output_tokens"] = kwargs.pop("max_tokens")
    logger.debug(f"Creating Google model: {kwargs.get('model')}")
    return ChatGoogleGenerativeAI(**kwargs)


def _create_openrouter_model(api_key: str, kwargs: dict[str, Any]) -> BaseChatModel:
    """Create an OpenRouter chat model (OpenAI-compatible API)."""
    from langchain_openai import ChatOpenAI

    kwargs["api_key"] = api_key
    kwargs["base_url"] = SUPPORTED_PROVIDERS["openrouter"]["base_url"]

    default_headers = dict(kwargs.get("default_headers") or {})
    default_headers.setdefault("X-Title", "NovelSynth")
    kwargs["default_headers"] = default_headers

    logger.debug(f"Creating OpenRouter model: {kwargs.get('model')}")
    return ChatOpenAI(**kwargs)


def get_provider_for_model(model: str) -> ProviderType:
    """Get the provider name for a given model."""
    return _infer_provider(model)


def is_provider_available(provider: str) -> bool:
    """Check if a provider's API key is set in the environment."""
    provider_info = SUPPORTED_PROVIDERS.get(provider, {})
    env_key = provider_info.get("env_key", f"{provider.upper()}_API_KEY")
    return bool(os.environ.get(env_key))


def get_available_providers() -> list[str]:
    return [p for p in SUPPORTED_PROVIDERS if is_provider_available(p)]


# ============================================================================
# Public API
# ============================================================================
__all__ = [
    "LLMConfig",
    "ProviderType",
    "SUPPORTED_PROVIDERS",
    "get_chat_model",
    "get_provider_for_model",
    "is_provider_available",
    "get_available_providers",
]
