"""
Event formatters module

Provides formatter implementations used by sinks to render events.
"""

from eventlog_module.formatters.base_formatter import BaseFormatter
from eventlog_module.formatters.text_formatter import TextFormatter
from eventlog_module.formatters.json_formatter import JSONFormatter

__all__ = [
    "BaseFormatter",
    "TextFormatter",
    "JSONFormatter",
]
