"""
Sink adapter interface

Every delivery target implements ``write(batch)``. A sink is called once
per flush with the full ordered batch, never one event at a time, so it
may format and emit several lines in one I/O call.
"""

from abc import ABC, abstractmethod
from typing import Sequence

from eventlog_module.core.event import Event


class SinkAdapter(ABC):
    """
    Abstract base class for sink adapters.

    The return value of ``write`` is not consulted. Sinks must not block
    the caller indefinitely; slow sinks should queue internally.
    """

    @abstractmethod
    def write(self, batch: Sequence[Event]) -> None:
        """
        Deliver a batch of events.

        Args:
            batch: Events in submission order
        """
        pass

    def flush(self) -> None:
        """Flush any buffered output."""
        pass

    def close(self) -> None:
        """Release resources held by the sink."""
        pass
