"""Sinks module - Event batch delivery targets"""

from eventlog_module.sinks.base_sink import SinkAdapter
from eventlog_module.sinks.console_sink import ConsoleSink

__all__ = ["SinkAdapter", "ConsoleSink"]
