"""
BSD 3-Clause License

Copyright (c) 2021, 🍀☀🌕🌥 🌊
All rights reserved.

Python Event Log - A structured event-logging pipeline with context
inheritance, field-based filtering and batched delivery
"""

__version__ = "1.0.0"
__author__ = "kcenon"
__email__ = "kcenon@naver.com"

from eventlog_module.core.logger import Logger
from eventlog_module.core.logger_builder import LoggerBuilder
from eventlog_module.core.event import Event, ExceptionInfo
from eventlog_module.core.severity import SeverityType
from eventlog_module.core.logger_config import LoggerConfig
from eventlog_module.core.scheduling import ManualTickScheduler, AsyncioTickScheduler
from eventlog_module.filters import FilterSpec, FilterRule, FilterConfigError, parse_filter

# Import submodules (not all classes by default)
from eventlog_module import filters
from eventlog_module import formatters
from eventlog_module import sinks
from eventlog_module import safety

__all__ = [
    "Logger",
    "LoggerBuilder",
    "Event",
    "ExceptionInfo",
    "SeverityType",
    "LoggerConfig",
    "ManualTickScheduler",
    "AsyncioTickScheduler",
    "FilterSpec",
    "FilterRule",
    "FilterConfigError",
    "parse_filter",
    "filters",
    "formatters",
    "sinks",
    "safety",
]
