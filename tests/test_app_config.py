"""Tests for modules/app_config.py - Application settings.

The module reads app.yaml at import time; these tests check the resulting
constants against the packaged file and exercise the value helpers.
"""

from __future__ import annotations

import pytest

from modules import app_config as config
from modules.app_config import (
    _get_bool,
    _get_float,
    _get_int,
    _get_optional_float,
    _get_str,
    _load_feature_settings,
    _section,
    get_feature_settings,
)
from modules.error_handler import ConfigurationError


class TestLoadedValues:
    """Constants loaded from the packaged app.yaml."""

    def test_provider_and_model(self):
        assert config.PROVIDER == "openai"
        assert config.MODEL == "gpt-4o-mini"

    def test_call_parameters(self):
        assert config.TEMPERATURE == 0.7
        assert config.MAX_OUTPUT_TOKENS == 8192
        assert config.API_TIMEOUT == 320
        assert config.MAX_RETRIES == 2
        assert config.CALL_TIMEOUT is None

    def test_toggles(self):
        assert config.SHOW_PROGRESS is True
        assert config.RATE_LIMITING_ENABLED is True
        assert config.MIN_CONTENT_LENGTH == 100


class TestFeatureSettings:
    """Per-feature model, output budget and temperature."""

    def test_packaged_overrides(self):
        summarize = get_feature_settings("summarize")

        assert summarize == {"model": "gpt-4o-mini", "max_output_tokens": 1024, "temperature": 0.5}
        assert get_feature_settings("suggestions")["temperature"] == 0.8

    def test_enhance_uses_top_level_settings(self):
        assert get_feature_settings() == {
            "model": config.MODEL,
            "max_output_tokens": config.MAX_OUTPUT_TOKENS,
            "temperature": config.TEMPERATURE,
        }

    def test_unknown_feature(self):
        with pytest.raises(ConfigurationError, match="translate"):
            get_feature_settings("translate")

    def test_invalid_values_skipped(self):
        """Values of the wrong type are ignored; valid siblings still apply."""
        settings = _load_feature_settings(
            {"analyze": {"model": "claude-3-5-haiku-latest", "max_output_tokens": "lots", "temperature": True}}
        )

        assert settings["analyze"]["model"] == "claude-3-5-haiku-latest"
        assert settings["analyze"]["max_output_tokens"] == config.MAX_OUTPUT_TOKENS
        assert settings["analyze"]["temperature"] == config.TEMPERATURE

    def test_returns_copy(self):
        get_feature_settings("analyze")["model"] = "changed"
        assert get_feature_settings("analyze")["model"] == "gpt-4o-mini"


class TestHelpers:
    """Tests for the value helpers."""

    def test_get_str(self):
        assert _get_str({"a": 5}, "a", "x") == "5"
        assert _get_str({"a": None}, "a", "x") == "x"
        assert _get_str({}, "a", "x") == "x"

    def test_get_int_invalid_falls_back(self):
        assert _get_int({"a": "12"}, "a", 3) == 12
        assert _get_int({"a": "twelve"}, "a", 3) == 3
        assert _get_int({"a": None}, "a", 3) == 3

    def test_get_float(self):
        assert _get_float({"a": "0.5"}, "a", 1.0) == 0.5
        assert _get_float({"a": []}, "a", 1.0) == 1.0

    @pytest.mark.parametrize(
        "value,expected",
        [(None, None), (30, 30.0), ("2.5", 2.5), (0, None), (-1, None), ("soon", None)],
    )
    def test_get_optional_float(self, value, expected):
        assert _get_optional_float({"a": value}, "a") == expected

    def test_get_bool(self):
        assert _get_bool({"a": 1}, "a", False) is True
        assert _get_bool({}, "a", True) is True
        assert _get_bool({"a": 0}, "a", True) is False

    def test_section(self):
        assert _section({"s": {"k": 1}}, "s") == {"k": 1}
        assert _section({"s": "oops"}, "s") == {}
        assert _section({}, "s") == {}
