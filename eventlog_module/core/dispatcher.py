"""
Dispatch and batch scheduling

Accepted events are buffered in submission order and delivered to sinks
in batches: inline for a synchronous logger, otherwise once per tick.
All state here is owned by the root logger and shared by its whole tree.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Tuple

from eventlog_module.core.diagnostics import report_internal_error
from eventlog_module.core.scheduling import AsyncioTickScheduler, TickScheduler
from eventlog_module.filters.filter_engine import FilterEngine

if TYPE_CHECKING:
    from eventlog_module.core.event import Event


@dataclass
class DispatchStats:
    """
    Statistics for dispatch monitoring.

    Tracks filter outcomes, flushes and sink failures.
    """

    submitted: int = 0
    accepted: int = 0
    rejected: int = 0
    batches_flushed: int = 0
    events_delivered: int = 0
    sink_errors: int = 0
    max_pending: int = 0
    total_flush_time_ms: float = 0.0
    last_flush_time: Optional[datetime] = None

    def record_flush(self, batch_size: int, flush_time_ms: float) -> None:
        """Record a batch flush operation."""
        self.batches_flushed += 1
        self.events_delivered += batch_size
        self.total_flush_time_ms += flush_time_ms
        self.last_flush_time = datetime.now()

    def update_pending(self, size: int) -> None:
        if size > self.max_pending:
            self.max_pending = size

    def to_dict(self) -> dict:
        """Convert stats to dictionary for serialization."""
        return {
            "submitted": self.submitted,
            "accepted": self.accepted,
            "rejected": self.rejected,
            "batches_flushed": self.batches_flushed,
            "events_delivered": self.events_delivered,
            "sink_errors": self.sink_errors,
            "max_pending": self.max_pending,
            "average_flush_time_ms": (
                self.total_flush_time_ms / self.batches_flushed
                if self.batches_flushed > 0
                else 0.0
            ),
            "last_flush_time": (
                self.last_flush_time.isoformat()
                if self.last_flush_time
                else None
            ),
        }


class Dispatcher:
    """
    Filters, buffers and flushes events for one logger tree.

    Each pending entry remembers the sinks of the node that submitted
    it, so a sink only receives events from nodes it was registered on
    at submission time. On flush every sink gets one ordered batch.

    Re-entrancy:
        The pending buffer is detached before any sink runs. A sink that
        logs while writing appends to a fresh buffer; it never receives
        or re-flushes the batch it is being handed.

    Example:
        dispatcher = Dispatcher(FilterEngine(), tick=ManualTickScheduler())
        dispatcher.submit(event, (sink,))
        dispatcher.flush()
    """

    def __init__(
        self,
        filter_engine: Optional[FilterEngine] = None,
        tick: Optional[TickScheduler] = None,
        sync: bool = False,
    ):
        """
        Initialize dispatcher.

        Args:
            filter_engine: Filter applied to every submitted event
            tick: Scheduler for deferred flushes (default: asyncio-backed)
            sync: Flush inline on every accepted event
        """
        self.filter_engine = filter_engine or FilterEngine()
        self.tick = tick or AsyncioTickScheduler()
        self.sync = sync

        self._pending: List[Tuple["Event", Tuple[Any, ...]]] = []
        self._flush_scheduled = False
        self._flushing = False
        self._sink_order: Dict[int, int] = {}
        self._registered: List[Any] = []
        self._stats = DispatchStats()

    @property
    def flush_scheduled(self) -> bool:
        return self._flush_scheduled

    def submit(self, event: "Event", sinks: Sequence[Any]) -> bool:
        """
        Filter an event and buffer it for delivery.

        Args:
            event: Normalized event
            sinks: Sinks of the submitting node

        Returns:
            True if the event was accepted
        """
        self._stats.submitted += 1
        if not self.filter_engine.should_emit(event):
            self._stats.rejected += 1
            return False

        self._stats.accepted += 1
        self._pending.append((event, tuple(sinks)))
        self._stats.update_pending(len(self._pending))

        if self.sync:
            # A nested submit from a sink is drained by the outer call
            if not self._flushing:
                while self._pending:
                    self.flush()
        elif not self._flush_scheduled:
            self._flush_scheduled = True
            self.tick.call_soon(self.flush)
        else:
            # The scheduled flush may be held waiting for an event loop
            self.tick.resume()
        return True

    def flush(self) -> int:
        """
        Deliver the pending batch to its sinks.

        Sinks are called in registration order, each once, with the
        events destined to it in submission order. A failing sink is
        reported to stderr and does not stop delivery to the others.

        Returns:
            Number of events delivered
        """
        batch = self._pending
        self._pending = []
        self._flush_scheduled = False
        if not batch:
            return 0

        start_time = time.perf_counter()
        self._flushing = True
        try:
            for sink, events in self._group_by_sink(batch):
                try:
                    sink.write(events)
                except Exception as e:
                    self._stats.sink_errors += 1
                    report_internal_error(f"sink {sink!r} failed to write a batch", e)
        finally:
            self._flushing = False

        flush_time_ms = (time.perf_counter() - start_time) * 1000
        self._stats.record_flush(len(batch), flush_time_ms)
        return len(batch)

    def register_sink(self, sink: Any) -> None:
        """
        Record a sink's registration order within the tree.

        Args:
            sink: Sink added to some node of the tree
        """
        key = id(sink)
        if key not in self._sink_order:
            self._sink_order[key] = len(self._registered)
            self._registered.append(sink)

    def _group_by_sink(self, batch):
        """Group a batch into per-sink event lists, in registration order."""
        groups: Dict[int, Tuple[Any, List["Event"]]] = {}
        for event, sinks in batch:
            for sink in sinks:
                key = id(sink)
                if key not in groups:
                    groups[key] = (sink, [])
                groups[key][1].append(event)

        # Sinks never registered here keep first-seen order, after the rest
        unregistered = len(self._sink_order)
        ordered = sorted(
            enumerate(groups.items()),
            key=lambda item: (self._sink_order.get(item[1][0], unregistered), item[0]),
        )
        return [group for _, (_, group) in ordered]

    def get_pending_count(self) -> int:
        """
        Get current buffer size.

        Returns:
            Number of events waiting for the next flush
        """
        return len(self._pending)

    def get_stats(self) -> DispatchStats:
        """
        Get dispatch statistics.

        Returns:
            Copy of current statistics
        """
        return DispatchStats(**vars(self._stats))

    def __repr__(self) -> str:
        return (
            f"Dispatcher(sync={self.sync}, pending={len(self._pending)}, "
            f"scheduled={self._flush_scheduled})"
        )
