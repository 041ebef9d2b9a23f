"""Local per-model request and token rate limiting.

Budgets are keyed by ``(provider, model id)`` and live in an explicit
:class:`RateLimiterStore`, so independent stores can coexist in one process
(one per orchestrator, one per test). Counters reset after a quiet minute;
a model with a requests-per-minute quota additionally spaces consecutive
requests ``60000 / rpm`` milliseconds apart.

All times are epoch milliseconds taken from an injectable clock.
"""

from __future__ import annotations

import asyncio
import threading
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from modules.cancellation import CancellationToken, run_cancellable
from modules.constants import RATE_WINDOW_MS
from modules.logger import setup_logger
from modules.types import ModelDescriptor, RateBudget

logger = setup_logger(__name__)

Clock = Callable[[], float]
Sleeper = Callable[[float], Awaitable[Any]]


def _epoch_ms() -> float:
    return time.time() * 1000.0


class RateLimiterStore:
    """Keyed rate budgets guarded by a lock."""

    def __init__(self, clock: Optional[Clock] = None, sleep: Optional[Sleeper] = None) -> None:
        self._clock: Clock = clock or _epoch_ms
        self._sleep: Sleeper = sleep or asyncio.sleep
        self._budgets: Dict[Tuple[str, str], RateBudget] = {}
        self.lock = threading.Lock()
        self.total_waits = 0
        self.total_wait_time = 0.0

    def _budget(self, provider: str, model_id: str) -> RateBudget:
        key = (provider, model_id)
        budget = self._budgets.get(key)
        if budget is None:
            budget = RateBudget(provider=provider, model=model_id)
            self._budgets[key] = budget
        return budget

    def can_make_request(
        self, provider: str, model: ModelDescriptor, estimated_tokens: int = 0
    ) -> bool:
        """
        Check whether a request fits the current budget.

        Resets the counters when the last request is at least a minute old.
        Quotas that are not set are not enforced.
        """
        with self.lock:
            budget = self._budget(provider, model.id)
            now = self._clock()

            if now - budget.last_request >= RATE_WINDOW_MS:
                budget.request_count = 0
                budget.token_count = 0

            if model.requests_per_minute and budget.request_count >= model.requests_per_minute:
                return False
            if (
                model.tokens_per_minute
                and budget.token_count + estimated_tokens > model.tokens_per_minute
            ):
                return False
            return now >= budget.next_available_time

    def record_request(self, provider: str, model: ModelDescriptor, token_count: int = 0) -> None:
        """Count one completed request and its tokens against the budget."""
        with self.lock:
            budget = self._budget(provider, model.id)
            now = self._clock()

            budget.request_count += 1
            budget.token_count += token_count
            budget.last_request = now

            if model.requests_per_minute:
                interval = RATE_WINDOW_MS / model.requests_per_minute
                budget.next_available_time = max(budget.next_available_time, now + interval)

    def get_wait_time(self, provider: str, model: ModelDescriptor) -> float:
        """Milliseconds until the next request may start (0 when it may start now)."""
        with self.lock:
            budget = self._budget(provider, model.id)
            return max(0.0, budget.next_available_time - self._clock())

    def _window_reset_wait(self, provider: str, model: ModelDescriptor) -> float:
        with self.lock:
            budget = self._budget(provider, model.id)
            return max(0.0, budget.last_request + RATE_WINDOW_MS - self._clock())

    def _pending_delay(self, provider: str, model: ModelDescriptor, estimated_tokens: int) -> float:
        """Spacing delay first, then the window reset when the counts are exhausted."""
        spacing = self.get_wait_time(provider, model)
        if spacing > 0:
            return spacing
        if self.can_make_request(provider, model, estimated_tokens):
            return 0.0
        return self._window_reset_wait(provider, model)

    async def wait_for_rate_limit(
        self,
        provider: str,
        model: ModelDescriptor,
        estimated_tokens: int = 0,
        cancel_token: Optional[CancellationToken] = None,
    ) -> float:
        """
        Suspend the caller until the budget allows the next request.

        Waits for the request spacing, then re-checks the budget and, while
        the per-minute counts are exhausted, waits for the window to reset.
        An estimate larger than the whole token quota is capped to it, so a
        fresh window always admits the request.

        Returns:
            The total delay in milliseconds (0 when no wait was needed).

        Raises:
            EnhancementCancelled: ``cancel_token`` fired during the wait.
        """
        if model.tokens_per_minute and estimated_tokens > model.tokens_per_minute:
            logger.warning(
                f"Estimated {estimated_tokens} tokens exceed the {model.tokens_per_minute} "
                f"tokens/minute quota of {model.id}"
            )
            estimated_tokens = model.tokens_per_minute

        waited = 0.0
        delay = self._pending_delay(provider, model, estimated_tokens)
        while delay > 0:
            logger.info(f"Rate limit reached for {provider}:{model.id}. Waiting {delay:.0f}ms...")
            await run_cancellable(self._sleep(delay / 1000.0), cancel_token)

            with self.lock:
                self.total_waits += 1
                self.total_wait_time += delay
            waited += delay
            delay = self._pending_delay(provider, model, estimated_tokens)
        return waited

    def get_budget(self, provider: str, model_id: str) -> Optional[RateBudget]:
        with self.lock:
            return self._budgets.get((provider, model_id))

    def get_budgets(self) -> List[RateBudget]:
        """Snapshot of all budgets (for diagnostics)."""
        with self.lock:
            return list(self._budgets.values())

    def clear(self) -> None:
        with self.lock:
            self._budgets.clear()
            self.total_waits = 0
            self.total_wait_time = 0.0

    def get_stats(self) -> Dict[str, Any]:
        with self.lock:
            return {
                "tracked_models": len(self._budgets),
                "requests_in_window": sum(b.request_count for b in self._budgets.values()),
                "total_waits": self.total_waits,
                "total_wait_time_ms": round(self.total_wait_time, 2),
                "average_wait_ms": round(self.total_wait_time / max(1, self.total_waits), 2),
            }


_default_store: Optional[RateLimiterStore] = None
_default_store_lock = threading.Lock()


def get_default_store() -> RateLimiterStore:
    """Get or create the process-wide store used when none is injected."""
    global _default_store
    with _default_store_lock:
        if _default_store is None:
            _default_store = RateLimiterStore()
        return _default_store


__all__ = ["RateLimiterStore", "get_default_store"]
