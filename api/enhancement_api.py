"""LangChain-backed text enhancement capability.

:class:`EnhancementClient` implements the capability protocol consumed by
``core.orchestrator``: one ``enhance`` call sends the instructions as the
system message and the content as the human message, and returns the model's
text together with the token usage it reported.

Chat models are created lazily per (model, max_tokens, temperature) and
reused. Provider SDK retries (``max_retries``) are the only retries; any
exception that escapes them is wrapped into a :class:`CapabilityError`
carrying a coarse failure category.
"""

from __future__ import annotations

import time
from collections import deque
from typing import Any, Callable, Deque, Dict, Optional, Tuple

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from api.llm_client import LLMConfig, ProviderType, get_chat_model, get_provider_for_model
from modules import app_config as config
from modules.error_handler import CapabilityError, EnhancementError, classify_provider_error
from modules.logger import setup_logger
from modules.types import CapabilityResponse, ModelDescriptor, TokenUsage

logger = setup_logger(__name__)

ChatModelFactory = Callable[[LLMConfig], BaseChatModel]


def extract_output_text(message: Any) -> str:
    """Normalize a chat model response into a single stripped string."""
    content = getattr(message, "content", message)
    parts: list[str] = []
    if isinstance(content, list):
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict):
                text = block.get("text") or block.get("output_text")
                if isinstance(text, str):
                    parts.append(text)
    elif isinstance(content, str):
        parts.append(content)
    return "".join(parts).strip()


def extract_usage(message: Any) -> TokenUsage:
    """Read token usage from ``AIMessage.usage_metadata`` (zeros when absent)."""
    usage = getattr(message, "usage_metadata", None) or {}
    return TokenUsage(
        prompt_tokens=int(usage.get("input_tokens", 0) or 0),
        completion_tokens=int(usage.get("output_tokens", 0) or 0),
    )


class EnhancementClient:
    """
    Enhancement capability backed by a LangChain chat model.

    Example:
        >>> client = EnhancementClient(provider="openai")
        >>> response = await client.enhance(text, instructions, model, 8192, 0.7)
        >>> response.text
    """

    def __init__(
        self,
        provider: Optional[ProviderType] = None,
        api_key: Optional[str] = None,
        timeout: int = config.API_TIMEOUT,
        max_retries: int = config.MAX_RETRIES,
        chat_model_factory: ChatModelFactory = get_chat_model,
    ) -> None:
        self.provider = provider
        self.api_key = api_key
        self.timeout = timeout
        self.max_retries = max_retries
        self._factory = chat_model_factory
        self._models: Dict[Tuple[str, int, float], BaseChatModel] = {}

        self.successful_requests = 0
        self.failed_requests = 0
        self.processing_times: Deque[float] = deque(maxlen=50)

    def provider_for(self, model: ModelDescriptor) -> str:
        """Provider used for ``model`` (the configured one, else inferred)."""
        return self.provider or get_provider_for_model(model.id)

    def _chat_model(self, model: ModelDescriptor, max_tokens: int, temperature: float) -> BaseChatModel:
        key = (model.id, max_tokens, temperature)
        chat_model = self._models.get(key)
        if chat_model is None:
            llm_config = LLMConfig(
                model=model.id,
                provider=self.provider,
                api_key=self.api_key,
                timeout=self.timeout,
                max_retries=self.max_retries,
                temperature=temperature,
                max_tokens=max_tokens,
            )
            chat_model = self._factory(llm_config)
            self._models[key] = chat_model
            logger.info(
                f"Initialized chat model: provider={llm_config.provider}, model={model.id}, "
                f"max_retries={self.max_retries}"
            )
        return chat_model

    async def enhance(
        self,
        text: str,
        instructions: str,
        model: ModelDescriptor,
        max_tokens: int,
        temperature: float,
    ) -> CapabilityResponse:
        """
        Enhance ``text`` following ``instructions``.

        Raises:
            ConfigurationError: The chat model could not be created (missing key)
            CapabilityError: The call failed or returned no text
        """
        chat_model = self._chat_model(model, max_tokens, temperature)
        messages = [SystemMessage(content=instructions), HumanMessage(content=text)]

        start = time.perf_counter()
        try:
            response = await chat_model.ainvoke(messages)
        except EnhancementError:
            self.failed_requests += 1
            raise
        except Exception as e:
            self.failed_requests += 1
            category = classify_provider_error(e)
            logger.error(f"Enhancement call failed for {model.id} ({category}): {e}")
            raise CapabilityError(f"{type(e).__name__}: {e}", category=category) from e

        elapsed = time.perf_counter() - start
        output = extract_output_text(response)
        if not output:
            self.failed_requests += 1
            logger.warning(f"Empty content extracted from {model.id} response.")
            raise CapabilityError(
                f"Model {model.id} returned empty content", category="malformed"
            )

        self.successful_requests += 1
        self.processing_times.append(elapsed)
        usage = extract_usage(response) if isinstance(response, AIMessage) else TokenUsage()
        logger.debug(
            f"Enhancement call succeeded for {model.id} in {elapsed:.2f}s "
            f"({usage.total_tokens} tokens)"
        )
        return CapabilityResponse(text=output, usage=usage, processing_time=elapsed)

    def get_stats(self) -> Dict[str, Any]:
        """Get statistics about API usage."""
        total = self.successful_requests + self.failed_requests
        avg_time = sum(self.processing_times) / len(self.processing_times) if self.processing_times else 0.0
        return {
            "provider": self.provider,
            "successful_requests": self.successful_requests,
            "failed_requests": self.failed_requests,
            "average_processing_time": round(avg_time, 2),
            "success_rate": round(self.successful_requests / max(1, total) * 100, 1),
        }


__all__ = ["EnhancementClient", "extract_output_text", "extract_usage"]
