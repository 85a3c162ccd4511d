"""
Logger configuration management
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from eventlog_module.core.severity import DEFAULT_LEVEL, TRACE_LEVEL
from eventlog_module.filters.filter_spec import FilterSpec


@dataclass
class LoggerConfig:
    """
    Root logger configuration.

    Derived loggers share their root's configuration; only the root
    reads it.
    """

    # Basic settings
    name: str = "eventlog"
    sync: bool = False

    # Filter settings
    global_level: int = DEFAULT_LEVEL
    filter: Optional[Union[str, FilterSpec]] = None

    # Fields carried by every event of the tree
    context: Dict[str, Any] = field(default_factory=dict)

    # Console settings
    colored_output: bool = True

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.name:
            raise ValueError("name must not be empty")
        if isinstance(self.global_level, bool) or not isinstance(self.global_level, int):
            raise ValueError("global_level must be an integer")
        if self.filter is not None and not isinstance(self.filter, (str, FilterSpec)):
            raise ValueError("filter must be filter text or a FilterSpec")
        if not isinstance(self.context, dict):
            self.context = dict(self.context)

    @classmethod
    def default(cls) -> "LoggerConfig":
        """Create default configuration."""
        return cls()

    @classmethod
    def console_config(cls) -> "LoggerConfig":
        """Create configuration for immediate console output."""
        return cls(sync=True)

    @classmethod
    def debug_config(cls) -> "LoggerConfig":
        """Create configuration for debugging."""
        return cls(
            global_level=TRACE_LEVEL,  # trace visible
            sync=True,
            colored_output=True,
        )
