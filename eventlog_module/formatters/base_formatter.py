"""
Base formatter interface
"""

from abc import ABC, abstractmethod
from eventlog_module.core.event import Event


class BaseFormatter(ABC):
    """
    Abstract base class for event formatters.

    Formatters convert Event objects into formatted strings.
    """

    @abstractmethod
    def format(self, event: Event) -> str:
        """
        Format an event into a string.

        Args:
            event: The event to format

        Returns:
            Formatted string representation of the event
        """
        pass

    def __call__(self, event: Event) -> str:
        """Allow formatters to be callable."""
        return self.format(event)
