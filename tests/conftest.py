"""Pytest fixtures and configuration for NovelSynth tests.

This module provides shared fixtures, fakes for the external capability and
the rate limiter clock, and sample content used across the test suite.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Callable, Generator, List, Optional, Tuple
from unittest.mock import patch

import pytest

from api.rate_limiter import RateLimiterStore
from modules.error_handler import CapabilityError
from modules.types import CapabilityResponse, ModelDescriptor, TokenUsage

SENTENCE = "The quick brown fox jumps over the lazy dog. "


# ============================================================================
# Fakes
# ============================================================================
class FakeClock:
    """Manually advanced clock returning epoch milliseconds."""

    def __init__(self, start_ms: float = 1_000_000.0) -> None:
        self.now = start_ms

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class FakeSleeper:
    """Async sleep replacement that advances a FakeClock instead of waiting."""

    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        self.clock.advance(seconds * 1000.0)


class FakeCapability:
    """
    Scriptable enhancement capability.

    Args:
        transform: Maps input text to output text (identity by default)
        fail_on_call: 1-based call number that raises a CapabilityError
        usage: Token usage reported for every successful call
    """

    def __init__(
        self,
        transform: Optional[Callable[[str], str]] = None,
        fail_on_call: Optional[int] = None,
        usage: TokenUsage = TokenUsage(prompt_tokens=10, completion_tokens=20),
    ) -> None:
        self.transform = transform or (lambda text: text)
        self.fail_on_call = fail_on_call
        self.usage = usage
        self.calls: List[Tuple[str, str]] = []

    async def enhance(
        self,
        text: str,
        instructions: str,
        model: ModelDescriptor,
        max_tokens: int,
        temperature: float,
    ) -> CapabilityResponse:
        self.calls.append((text, instructions))
        if self.fail_on_call is not None and len(self.calls) == self.fail_on_call:
            raise CapabilityError("provider unavailable", category="network")
        return CapabilityResponse(text=self.transform(text), usage=self.usage, processing_time=0.01)


# ============================================================================
# Path Fixtures
# ============================================================================
@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ============================================================================
# Rate Limiter Fixtures
# ============================================================================
@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_sleeper(fake_clock: FakeClock) -> FakeSleeper:
    return FakeSleeper(fake_clock)


@pytest.fixture
def rate_store(fake_clock: FakeClock, fake_sleeper: FakeSleeper) -> RateLimiterStore:
    """Isolated rate limiter store driven by the fake clock."""
    return RateLimiterStore(clock=fake_clock, sleep=fake_sleeper)


# ============================================================================
# Model Fixtures
# ============================================================================
@pytest.fixture
def small_model() -> ModelDescriptor:
    """Model whose 4000-token budget forces segmentation above 12000 chars."""
    return ModelDescriptor(id="test-small", max_tokens=4000, requests_per_minute=60, tokens_per_minute=100000)


@pytest.fixture
def large_model() -> ModelDescriptor:
    return ModelDescriptor(id="test-large", max_tokens=128000)


# ============================================================================
# Capability Fixtures
# ============================================================================
@pytest.fixture
def fake_capability() -> FakeCapability:
    return FakeCapability()


# ============================================================================
# Content Fixtures
# ============================================================================
def make_text(length: int) -> str:
    """Deterministic prose of exactly ``length`` characters."""
    repeats = length // len(SENTENCE) + 1
    return (SENTENCE * repeats)[:length]


@pytest.fixture
def long_text() -> str:
    """30,000 characters of prose with regular sentence boundaries."""
    return make_text(30000)


@pytest.fixture
def text_with_image_at_15000() -> Tuple[str, str]:
    """30,000-character text with one <img> tag inserted at offset 15,000."""
    tag = '<img src="https://example.com/map.png" alt="Map of the valley">'
    base = make_text(30000 - len(tag))
    return base[:15000] + tag + base[15000:], tag


@pytest.fixture
def short_article() -> str:
    return make_text(600)


# ============================================================================
# Environment Fixtures
# ============================================================================
@pytest.fixture
def mock_api_keys():
    """Provide mock API keys for every provider."""
    with patch.dict(os.environ, {
        "OPENAI_API_KEY": "test-openai-key",
        "ANTHROPIC_API_KEY": "test-anthropic-key",
        "GOOGLE_API_KEY": "test-google-key",
        "OPENROUTER_API_KEY": "test-openrouter-key",
    }):
        yield


@pytest.fixture
def no_api_keys():
    """Remove provider API keys from the environment."""
    with patch.dict(os.environ, {}, clear=True):
        yield


@pytest.fixture
def text_factory() -> Callable[[int], str]:
    """Factory for deterministic prose of a given length."""
    return make_text


@pytest.fixture
def capability_factory() -> Callable[..., FakeCapability]:
    """Factory for FakeCapability instances with custom behaviour."""
    return FakeCapability
