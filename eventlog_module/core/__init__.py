"""
Core module for the event pipeline

This module contains the fundamental classes:
- Event: Normalized event record
- SeverityType: Severity enumeration
- Logger: Root and derived loggers
- LoggerBuilder: Builder pattern for logger construction
- LoggerConfig: Configuration management
- Dispatcher: Batch buffering and flushing
"""

from eventlog_module.core.severity import SeverityType, DEFAULT_LEVEL, TRACE_LEVEL
from eventlog_module.core.event import Event, ExceptionInfo
from eventlog_module.core.raw_call import (
    TextMessage,
    StructuredMessage,
    ErrorPayload,
    classify_message,
)
from eventlog_module.core.normalizer import normalize
from eventlog_module.core.scheduling import (
    TickScheduler,
    ManualTickScheduler,
    AsyncioTickScheduler,
)
from eventlog_module.core.dispatcher import Dispatcher, DispatchStats
from eventlog_module.core.logger_config import LoggerConfig
from eventlog_module.core.logger import Logger
from eventlog_module.core.logger_builder import LoggerBuilder

__all__ = [
    "SeverityType",
    "DEFAULT_LEVEL",
    "TRACE_LEVEL",
    "Event",
    "ExceptionInfo",
    "TextMessage",
    "StructuredMessage",
    "ErrorPayload",
    "classify_message",
    "normalize",
    "TickScheduler",
    "ManualTickScheduler",
    "AsyncioTickScheduler",
    "Dispatcher",
    "DispatchStats",
    "LoggerConfig",
    "Logger",
    "LoggerBuilder",
]
