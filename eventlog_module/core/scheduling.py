"""
Tick schedulers for deferred flushing

A tick scheduler runs a callback "soon": after the current call returns,
before the next unit of work. Bursts of log calls within one tick are
coalesced into a single flush. No threads are involved.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections import deque
from typing import Callable, Deque, Optional


class TickScheduler(ABC):
    """Abstract deferred-callback scheduler."""

    @abstractmethod
    def call_soon(self, callback: Callable[[], None]) -> None:
        """
        Schedule callback to run on the next tick.

        Args:
            callback: Zero-argument callable
        """
        pass

    def run_pending(self) -> int:
        """
        Run callbacks held by this scheduler.

        Returns:
            Number of callbacks run
        """
        return 0

    def resume(self) -> None:
        """Hand held callbacks to the underlying loop, if one is now usable."""
        pass


class ManualTickScheduler(TickScheduler):
    """
    Scheduler whose ticks are driven by the host.

    Callbacks queue up in FIFO order until ``run_pending()`` is called,
    e.g. from an idle hook or a test.
    """

    def __init__(self):
        self._callbacks: Deque[Callable[[], None]] = deque()

    def call_soon(self, callback: Callable[[], None]) -> None:
        self._callbacks.append(callback)

    def run_pending(self) -> int:
        """
        Run queued callbacks, including ones queued while running.

        Returns:
            Number of callbacks run
        """
        count = 0
        while self._callbacks:
            callback = self._callbacks.popleft()
            callback()
            count += 1
        return count

    @property
    def pending_count(self) -> int:
        """Number of callbacks waiting for the next tick."""
        return len(self._callbacks)

    def __repr__(self) -> str:
        return f"ManualTickScheduler(pending={len(self._callbacks)})"


class AsyncioTickScheduler(TickScheduler):
    """
    Scheduler backed by an asyncio event loop.

    Uses the loop given at construction, or the loop running in the
    calling thread. Callbacks scheduled while no loop is running are
    held until a loop becomes usable (``call_soon()`` or ``resume()``
    moves them onto it, oldest first) or ``run_pending()`` runs them.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
        self._held = ManualTickScheduler()

    def _usable_loop(self) -> Optional[asyncio.AbstractEventLoop]:
        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                return None
        if loop.is_closed():
            return None
        return loop

    def call_soon(self, callback: Callable[[], None]) -> None:
        loop = self._usable_loop()
        if loop is None:
            self._held.call_soon(callback)
            return
        self._move_held(loop)
        loop.call_soon(callback)

    def resume(self) -> None:
        if not self._held.pending_count:
            return
        loop = self._usable_loop()
        if loop is not None:
            self._move_held(loop)

    def _move_held(self, loop: asyncio.AbstractEventLoop) -> None:
        callbacks = self._held._callbacks
        while callbacks:
            loop.call_soon(callbacks.popleft())

    def run_pending(self) -> int:
        return self._held.run_pending()

    def __repr__(self) -> str:
        return f"AsyncioTickScheduler(loop={self._loop!r}, held={self._held.pending_count})"
