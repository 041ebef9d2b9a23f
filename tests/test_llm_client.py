"""Tests for api/llm_client.py - Multi-provider chat model factory."""

from __future__ import annotations

import os
from unittest.mock import patch, MagicMock

import pytest

from api.llm_client import (
    LLMConfig,
    get_chat_model,
    get_provider_for_model,
    is_provider_available,
    get_available_providers,
    SUPPORTED_PROVIDERS,
    _infer_provider,
    _get_api_key,
    _split_provider_prefix,
)
from modules.error_handler import ConfigurationError


class TestLLMConfig:
    """Tests for LLMConfig dataclass."""

    def test_basic_init(self):
        """Basic initialization with model name."""
        config = LLMConfig(model="gpt-4o-mini")

        assert config.model == "gpt-4o-mini"
        assert config.provider == "openai"  # Auto-inferred

    def test_explicit_provider(self):
        """Explicit provider is used."""
        config = LLMConfig(model="gpt-4o-mini", provider="openrouter")

        assert config.provider == "openrouter"

    def test_default_values(self):
        """Default values are set correctly."""
        config = LLMConfig(model="gpt-4o")

        assert config.timeout == 320
        assert config.max_retries == 2
        assert config.temperature is None
        assert config.max_tokens is None
        assert config.extra_kwargs == {}


class TestInferProvider:
    """Tests for _infer_provider function."""

    def test_explicit_prefix(self):
        """Explicit provider prefixes are detected."""
        assert _infer_provider("openai:gpt-4o") == "openai"
        assert _infer_provider("anthropic:claude-3-opus") == "anthropic"
        assert _infer_provider("google:gemini-1.5-pro") == "google"

    def test_model_prefixes(self):
        """Providers are inferred from model name prefixes."""
        assert _infer_provider("gpt-4o") == "openai"
        assert _infer_provider("o3-mini") == "openai"
        assert _infer_provider("claude-3-5-sonnet-latest") == "anthropic"
        assert _infer_provider("gemini-1.5-flash") == "google"

    def test_vendor_qualified_ids_go_to_openrouter(self):
        """Ids with a vendor path are OpenRouter models."""
        assert _infer_provider("meta-llama/llama-3.2-3b-instruct:free") == "openrouter"
        assert _infer_provider("anthropic/claude-3.5-sonnet") == "openrouter"

    def test_unknown_defaults_to_openai(self):
        """Unknown models default to OpenAI."""
        assert _infer_provider("custom-model-v1") == "openai"


class TestSplitProviderPrefix:
    """Tests for _split_provider_prefix."""

    def test_known_prefix_split(self):
        assert _split_provider_prefix("anthropic:claude-3-opus") == ("anthropic", "claude-3-opus")

    def test_colon_suffix_left_alone(self):
        """OpenRouter ':free' suffixes are part of the id."""
        model = "meta-llama/llama-3.2-3b-instruct:free"
        assert _split_provider_prefix(model) == (None, model)


class TestGetApiKey:
    """Tests for _get_api_key function."""

    def test_uses_provided_key(self, mock_api_keys):
        """Uses provided API key when given."""
        assert _get_api_key("openai", "custom-key") == "custom-key"

    def test_uses_env_variable(self, mock_api_keys):
        """Uses environment variable when no key provided."""
        assert _get_api_key("anthropic", None) == "test-anthropic-key"

    def test_raises_on_missing_key(self, no_api_keys):
        """Raises ConfigurationError naming the variable when key not found."""
        with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
            _get_api_key("openai", None)


class TestGetChatModel:
    """Tests for get_chat_model function."""

    def test_creates_openai_model(self, mock_api_keys):
        """Creates OpenAI model with correct class and arguments."""
        with patch("langchain_openai.ChatOpenAI") as mock_class:
            mock_class.return_value = MagicMock()

            config = LLMConfig(model="gpt-4o-mini", temperature=0.3, max_tokens=2048)
            model = get_chat_model(config)

            assert model is mock_class.return_value
            call_kwargs = mock_class.call_args[1]
            assert call_kwargs["model"] == "gpt-4o-mini"
            assert call_kwargs["api_key"] == "test-openai-key"
            assert call_kwargs["temperature"] == 0.3
            assert call_kwargs["max_tokens"] == 2048
            assert call_kwargs["timeout"] == 320

    def test_creates_anthropic_model(self, mock_api_keys):
        """Creates Anthropic model with correct class."""
        with patch("langchain_anthropic.ChatAnthropic") as mock_class:
            mock_class.return_value = MagicMock()

            get_chat_model(LLMConfig(model="claude-3-5-sonnet-latest"))

            mock_class.assert_called_once()
            assert mock_class.call_args[1]["api_key"] == "test-anthropic-key"

    def test_google_uses_max_output_tokens(self, mock_api_keys):
        """Google models receive max_output_tokens and google_api_key."""
        with patch("langchain_google_genai.ChatGoogleGenerativeAI") as mock_class:
            mock_class.return_value = MagicMock()

            get_chat_model(LLMConfig(model="gemini-1.5-flash", max_tokens=1000))

            call_kwargs = mock_class.call_args[1]
            assert call_kwargs["max_output_tokens"] == 1000
            assert "max_tokens" not in call_kwargs
            assert call_kwargs["google_api_key"] == "test-google-key"

    def test_creates_openrouter_model(self, mock_api_keys):
        """Creates OpenRouter model with base URL and title header."""
        with patch("langchain_openai.ChatOpenAI") as mock_class:
            mock_class.return_value = MagicMock()

            get_chat_model(LLMConfig(model="anthropic/claude-3.5-sonnet"))

            call_kwargs = mock_class.call_args[1]
            assert call_kwargs["base_url"] == "https://openrouter.ai/api/v1"
            assert call_kwargs["api_key"] == "test-openrouter-key"
            assert call_kwargs["default_headers"]["X-Title"] == "NovelSynth"

    def test_extra_kwargs_passed_through(self, mock_api_keys):
        with patch("langchain_openai.ChatOpenAI") as mock_class:
            get_chat_model(LLMConfig(model="gpt-4o", extra_kwargs={"top_p": 0.9}))

            assert mock_class.call_args[1]["top_p"] == 0.9

    def test_unsupported_provider_raises(self, mock_api_keys):
        """Unsupported provider raises ConfigurationError."""
        config = LLMConfig(model="test", provider="unsupported")  # type: ignore

        with pytest.raises(ConfigurationError, match="Unsupported provider"):
            get_chat_model(config)

    def test_missing_key_raises_before_construction(self, no_api_keys):
        with patch("langchain_openai.ChatOpenAI") as mock_class:
            with pytest.raises(ConfigurationError):
                get_chat_model(LLMConfig(model="gpt-4o"))

            mock_class.assert_not_called()

    def test_removes_provider_prefix_from_model(self, mock_api_keys):
        """Provider prefix is removed from model name."""
        with patch("langchain_openai.ChatOpenAI") as mock_class:
            mock_class.return_value = MagicMock()

            get_chat_model(LLMConfig(model="openai:gpt-4o-mini"))

            assert mock_class.call_args[1]["model"] == "gpt-4o-mini"


class TestProviderAvailability:
    """Tests for provider lookup helpers."""

    def test_get_provider_for_model(self):
        assert get_provider_for_model("gpt-4o") == "openai"
        assert get_provider_for_model("claude-3-opus") == "anthropic"

    def test_available_when_key_set(self, mock_api_keys):
        assert is_provider_available("openai") is True
        assert set(get_available_providers()) == set(SUPPORTED_PROVIDERS)

    def test_unavailable_without_keys(self):
        with patch.dict(os.environ, {}, clear=True):
            assert is_provider_available("openai") is False
            assert get_available_providers() == []

    def test_provider_has_required_keys(self):
        """Each provider has required configuration keys."""
        for provider, config in SUPPORTED_PROVIDERS.items():
            assert "package" in config
            assert "class" in config
            assert "env_key" in config
