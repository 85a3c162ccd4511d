"""
Severity type enumeration

Coarse category of a log call, with the default numeric level used
for each category.
"""

from enum import Enum
from typing import Dict


# Level assigned to every severity except trace
DEFAULT_LEVEL = 0

# Trace stays hidden unless verbosity is explicitly raised
TRACE_LEVEL = 5


class SeverityType(str, Enum):
    """
    Severity type of a log call.

    The numeric verbosity rank of an event is separate from its
    severity type; see ``default_level``.
    """

    DEBUG = "debug"
    INFO = "info"
    TRACE = "trace"
    ERROR = "error"
    EXCEPTION = "exception"

    def __str__(self) -> str:
        """String representation of severity type."""
        return self.value

    @classmethod
    def from_string(cls, name: str) -> "SeverityType":
        """
        Convert string to SeverityType.

        Args:
            name: Severity name (case-insensitive)

        Returns:
            SeverityType enum value

        Raises:
            ValueError: If name is not valid
        """
        try:
            return cls(name.lower())
        except ValueError:
            raise ValueError(f"Invalid severity type: {name}") from None

    @property
    def default_level(self) -> int:
        """Level given to events that carry no explicit ``level`` field."""
        if self is SeverityType.TRACE:
            return TRACE_LEVEL
        return DEFAULT_LEVEL

    @property
    def color_code(self) -> str:
        """
        Get ANSI color code for this severity.

        Returns:
            ANSI escape sequence
        """
        return SEVERITY_COLORS.get(self, "\033[0m")

    @property
    def reset_code(self) -> str:
        """ANSI reset code."""
        return "\033[0m"


SEVERITY_COLORS: Dict[SeverityType, str] = {
    SeverityType.TRACE: "\033[37m",      # White
    SeverityType.DEBUG: "\033[36m",      # Cyan
    SeverityType.INFO: "\033[32m",       # Green
    SeverityType.ERROR: "\033[31m",      # Red
    SeverityType.EXCEPTION: "\033[35m",  # Magenta
}
