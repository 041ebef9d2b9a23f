"""API layer for NovelSynth.

This package provides the LLM integration layer:

- **llm_client**: LangChain chat model factory for OpenAI, Anthropic, Google and OpenRouter
- **enhancement_api**: EnhancementClient, the LangChain-backed enhancement capability
- **model_catalog**: model descriptors (context size, per-minute quotas)
- **rate_limiter**: RateLimiterStore with per (provider, model) budgets

Example:
    >>> from api import EnhancementClient, get_model_catalog
    >>> model = get_model_catalog().get("gpt-4o-mini")
    >>> response = await EnhancementClient().enhance(text, instructions, model, 8192, 0.7)
"""

from api.enhancement_api import EnhancementClient
from api.llm_client import LLMConfig, get_chat_model
from api.model_catalog import ModelCatalog, get_model_catalog
from api.rate_limiter import RateLimiterStore, get_default_store

__all__ = [
    "EnhancementClient",
    "LLMConfig",
    "get_chat_model",
    "ModelCatalog",
    "get_model_catalog",
    "RateLimiterStore",
    "get_default_store",
]
