"""
Base filter interface
"""

from abc import ABC, abstractmethod
from eventlog_module.core.event import Event


class BaseFilter(ABC):
    """
    Abstract base class for event filters.

    Filters determine whether an event should be dispatched or discarded.
    """

    @abstractmethod
    def should_emit(self, event: Event) -> bool:
        """
        Determine if an event should be emitted.

        Args:
            event: The event to filter

        Returns:
            True if the event should be emitted, False otherwise
        """
        pass

    def __call__(self, event: Event) -> bool:
        """Allow filters to be callable."""
        return self.should_emit(event)
