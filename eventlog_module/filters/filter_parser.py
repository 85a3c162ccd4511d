"""
Textual filter grammar

Compact configuration form of a filter specification::

    type=error,exception/source=aws:4,web:-1/module=db,cache:2

Clauses are separated by ``/``; each clause is ``key=value:level,...``.
A value without a level gets RULE_DEFAULT_LEVEL.

The ``type`` clause lists severity types instead of field values. A
bare type is allowed, ``!type`` is denied, and ``all`` lifts the allow
restriction::

    type=!debug,!trace
"""

import re
from typing import Dict, List, Set

from eventlog_module.core.severity import DEFAULT_LEVEL, SeverityType
from eventlog_module.filters.filter_spec import (
    FilterRule,
    FilterSpec,
    RESERVED_FIELD_KEYS,
    RULE_DEFAULT_LEVEL,
)


CLAUSE_SEPARATOR = "/"
VALUE_SEPARATOR = ","
LEVEL_SEPARATOR = ":"

# Clause key selecting severity types rather than a field
TYPE_KEY = "type"
NEGATION = "!"
ALL_TYPES = "all"

_LEVEL_PATTERN = re.compile(r"^[+-]?\d+$")


class FilterConfigError(ValueError):
    """Raised when a filter configuration cannot be parsed."""

    def __init__(self, message: str, clause: str = ""):
        super().__init__(f"{message}: {clause!r}" if clause else message)
        self.clause = clause


def parse_filter(text: str, global_level: int = DEFAULT_LEVEL) -> FilterSpec:
    """
    Parse the textual filter grammar.

    Args:
        text: Filter text; empty or blank text yields no rules
        global_level: Global level of the resulting spec

    Returns:
        Parsed FilterSpec

    Raises:
        FilterConfigError: If any clause is malformed

    Example:
        spec = parse_filter("type=!debug/source=aws:4,web:-1")
        spec.rules[0].value_levels  # {"aws": 4, "web": -1}
        spec.denied_types           # {SeverityType.DEBUG}
    """
    if not isinstance(text, str):
        raise FilterConfigError(f"filter must be a string, not {type(text).__name__}")

    rules: List[FilterRule] = []
    allowed: Set[SeverityType] = set()
    denied: Set[SeverityType] = set()
    seen = set()
    for clause in text.split(CLAUSE_SEPARATOR):
        clause = clause.strip()
        if not clause:
            continue
        key, values = _split_clause(clause)
        if key in seen:
            raise FilterConfigError("duplicate filter key", clause)
        seen.add(key)

        if key == TYPE_KEY:
            _parse_types(clause, values, allowed, denied)
        else:
            rules.append(FilterRule(key, _parse_levels(clause, values)))

    return FilterSpec(
        global_level=global_level,
        rules=tuple(rules),
        allowed_types=allowed,
        denied_types=denied,
    )


def format_filter(spec: FilterSpec) -> str:
    """
    Render a spec back into the textual grammar.

    Args:
        spec: Filter specification

    Returns:
        Filter text (global level is not part of the grammar)
    """
    clauses = []
    types = [t.value for t in SeverityType if t in spec.allowed_types]
    types += [f"{NEGATION}{t.value}" for t in SeverityType if t in spec.denied_types]
    if types:
        clauses.append(f"{TYPE_KEY}={VALUE_SEPARATOR.join(types)}")
    for rule in spec.rules:
        values = VALUE_SEPARATOR.join(
            f"{value}{LEVEL_SEPARATOR}{level}" for value, level in rule.value_levels.items()
        )
        clauses.append(f"{rule.field_key}={values}")
    return CLAUSE_SEPARATOR.join(clauses)


def _split_clause(clause: str):
    key, sep, values = clause.partition("=")
    key = key.strip()
    if not sep:
        raise FilterConfigError("filter clause is missing '='", clause)
    if not key:
        raise FilterConfigError("filter clause has an empty key", clause)
    if key in RESERVED_FIELD_KEYS:
        raise FilterConfigError(f"{key!r} is not an event field and cannot be filtered on", clause)
    if not values.strip():
        raise FilterConfigError("filter clause has no values", clause)
    return key, values


def _parse_levels(clause: str, values: str) -> Dict[str, int]:
    levels: Dict[str, int] = {}
    for item in values.split(VALUE_SEPARATOR):
        value, sep, level = item.partition(LEVEL_SEPARATOR)
        value = value.strip()
        if not value:
            raise FilterConfigError("filter clause has an empty value", clause)
        if sep:
            level = level.strip()
            if not _LEVEL_PATTERN.match(level):
                raise FilterConfigError(f"invalid level {level!r} for {value!r}", clause)
            levels[value] = int(level)
        else:
            levels[value] = RULE_DEFAULT_LEVEL
    return levels


def _parse_types(clause: str, values: str, allowed: Set[SeverityType], denied: Set[SeverityType]) -> None:
    for item in values.split(VALUE_SEPARATOR):
        name = item.strip()
        if LEVEL_SEPARATOR in name:
            raise FilterConfigError("severity types take no level", clause)
        target = allowed
        if name.startswith(NEGATION):
            name = name[len(NEGATION):].strip()
            target = denied
        if not name:
            raise FilterConfigError("filter clause has an empty value", clause)
        if name == ALL_TYPES and target is allowed:
            continue
        try:
            target.add(SeverityType.from_string(name))
        except ValueError:
            raise FilterConfigError(f"unknown severity type {name!r}", clause) from None
