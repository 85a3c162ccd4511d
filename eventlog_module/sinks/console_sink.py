"""Console sink with ANSI colors"""

import sys
from typing import Sequence

from eventlog_module.core.event import Event
from eventlog_module.sinks.base_sink import SinkAdapter


class ConsoleSink(SinkAdapter):
    """Write event batches to a console stream with optional colors."""

    def __init__(self, colored: bool = True, stream=None, formatter=None):
        """
        Initialize console sink.

        Args:
            colored: Use ANSI color codes
            stream: Output stream (default: sys.stderr)
            formatter: Event formatter (default: uses event's __str__)
        """
        self.colored = colored
        self.stream = stream or sys.stderr
        self.formatter = formatter

    def format(self, event: Event) -> str:
        """Render one event as text."""
        if self.formatter:
            msg = self.formatter.format(event)
        else:
            msg = str(event)
            if event.exception:
                msg += "\n" + "\n".join(
                    "    " + line for line in event.exception.stack_frames
                )

        if self.colored and not self.formatter:
            severity = event.severity_type
            msg = f"{severity.color_code}{msg}{severity.reset_code}"
        return msg

    def write(self, batch: Sequence[Event]) -> None:
        """Write all events of the batch in one stream write."""
        if not batch:
            return
        self.stream.write("".join(self.format(event) + "\n" for event in batch))
        self.stream.flush()

    def flush(self) -> None:
        """Flush stream."""
        self.stream.flush()

    def __repr__(self) -> str:
        return f"ConsoleSink(colored={self.colored}, formatter={self.formatter!r})"
