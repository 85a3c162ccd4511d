"""
Event filters module

Provides the filter specification, its textual grammar, and the engine
that evaluates it.
"""

from eventlog_module.filters.base_filter import BaseFilter
from eventlog_module.filters.filter_spec import (
    FilterRule,
    FilterSpec,
    REJECT_LEVEL,
    RESERVED_FIELD_KEYS,
    RULE_DEFAULT_LEVEL,
)
from eventlog_module.filters.filter_parser import (
    FilterConfigError,
    format_filter,
    parse_filter,
)
from eventlog_module.filters.filter_engine import FilterEngine

__all__ = [
    "BaseFilter",
    "FilterRule",
    "FilterSpec",
    "REJECT_LEVEL",
    "RESERVED_FIELD_KEYS",
    "RULE_DEFAULT_LEVEL",
    "FilterConfigError",
    "format_filter",
    "parse_filter",
    "FilterEngine",
]
