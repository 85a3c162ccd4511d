"""
JSON formatter for structured output

Formats events as JSON objects
"""

import json
from eventlog_module.core.event import Event
from eventlog_module.formatters.base_formatter import BaseFormatter


class JSONFormatter(BaseFormatter):
    """
    Format events as JSON objects.

    Produces structured output suitable for log aggregation systems.
    """

    def __init__(
        self,
        include_directives: bool = True,
        indent: int = None,
        ensure_ascii: bool = False
    ):
        """
        Initialize JSON formatter.

        Args:
            include_directives: Include directives in output
            indent: JSON indentation (None for compact, 2 for readable)
            ensure_ascii: Escape non-ASCII characters

        Example:
            # Compact JSON (one line per event)
            formatter = JSONFormatter()

            # Pretty-printed JSON
            formatter = JSONFormatter(indent=2)
        """
        self.include_directives = include_directives
        self.indent = indent
        self.ensure_ascii = ensure_ascii

    def format(self, event: Event) -> str:
        """
        Format event as JSON.

        Non-JSON field values are stringified.

        Args:
            event: Event to format

        Returns:
            JSON string
        """
        data = event.to_dict()
        if data["exception"] is None:
            del data["exception"]
        if not self.include_directives or not data["directives"]:
            del data["directives"]

        return json.dumps(
            data,
            indent=self.indent,
            ensure_ascii=self.ensure_ascii,
            default=str,
        )

    def __repr__(self) -> str:
        """String representation."""
        return f"JSONFormatter(indent={self.indent})"
