"""Cooperative cancellation for enhancement runs.

A :class:`CancellationToken` is handed to the orchestrator by the caller. It
is checked between segments and raced against the two suspension points of
a run: the rate-limit wait and the capability call.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Optional, TypeVar

from modules.error_handler import EnhancementCancelled

T = TypeVar("T")

__all__ = ["CancellationToken", "run_cancellable"]


class CancellationToken:
    """One-shot cancellation signal backed by an ``asyncio.Event``."""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self.reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "Enhancement cancelled") -> None:
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise EnhancementCancelled(self.reason or "Enhancement cancelled")

    async def wait(self) -> None:
        await self._event.wait()


async def run_cancellable(awaitable: Awaitable[T], token: Optional[CancellationToken]) -> T:
    """
    Await ``awaitable`` unless ``token`` fires first.

    Raises:
        EnhancementCancelled: The token was cancelled before or while waiting;
            the pending work is cancelled.
    """
    if token is None:
        return await awaitable

    work = asyncio.ensure_future(awaitable)
    if token.cancelled:
        work.cancel()
        await asyncio.gather(work, return_exceptions=True)
        token.raise_if_cancelled()

    watcher = asyncio.ensure_future(token.wait())
    try:
        await asyncio.wait({work, watcher}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        if not watcher.done():
            watcher.cancel()
            await asyncio.gather(watcher, return_exceptions=True)

    if not work.done():
        work.cancel()
        await asyncio.gather(work, return_exceptions=True)
        token.raise_if_cancelled()

    return work.result()
