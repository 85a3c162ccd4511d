"""
Filter engine

Evaluates a FilterSpec against an event. Severity types outside the
allow set, or in the deny set, are suppressed first. Rules then act as
an allow-list refinement of the global level: a rule can raise the
level cutoff for a listed field value, and a field value a rule does
not list suppresses the event whatever its level.
"""

from typing import Optional, Union

from eventlog_module.core.event import Event
from eventlog_module.filters.base_filter import BaseFilter
from eventlog_module.filters.filter_parser import FilterConfigError, parse_filter
from eventlog_module.filters.filter_spec import FilterSpec


class FilterEngine(BaseFilter):
    """
    Level and per-field rule filter.

    Example:
        engine = FilterEngine(parse_filter("source=aws:4,web:-1"))
        engine.should_emit(event)
    """

    def __init__(self, spec: Optional[FilterSpec] = None):
        """
        Initialize filter engine.

        Args:
            spec: Filter specification (default: global level 0, no rules)
        """
        self._spec = spec or FilterSpec()

    @property
    def spec(self) -> FilterSpec:
        return self._spec

    @property
    def global_level(self) -> int:
        return self._spec.global_level

    def configure(self, spec: Union[FilterSpec, str], global_level: Optional[int] = None) -> FilterSpec:
        """
        Replace the filter specification.

        Args:
            spec: FilterSpec or filter text
            global_level: Global level to apply; keeps the current one
                          for text, the spec's own for a FilterSpec

        Returns:
            The specification now in effect

        Raises:
            FilterConfigError: If spec text is malformed
        """
        if isinstance(spec, str):
            level = self._spec.global_level if global_level is None else global_level
            spec = parse_filter(spec, global_level=level)
        elif isinstance(spec, FilterSpec):
            if global_level is not None:
                spec = spec.with_level(global_level)
        else:
            raise FilterConfigError(f"unsupported filter type {type(spec).__name__}")
        self._spec = spec
        return spec

    def set_level(self, global_level: int) -> None:
        """Set the global level, keeping the rules."""
        self._spec = self._spec.with_level(int(global_level))

    def effective_level(self, event: Event) -> Optional[int]:
        """
        Compute the level cutoff for an event.

        A denied severity type, a field value missing from its rule, or
        a field value mapped to a negative level rejects the event
        outright.

        Args:
            event: Event to evaluate

        Returns:
            Level cutoff, or None if the event was rejected
        """
        if not self._spec.permits_type(event.severity_type):
            return None
        effective = self._spec.global_level
        for rule in self._spec.rules:
            if rule.field_key not in event.fields:
                continue
            matched = rule.level_for(event.fields[rule.field_key])
            if matched < 0:
                return None
            effective = max(effective, matched)
        return effective

    def should_emit(self, event: Event) -> bool:
        """
        Check whether an event passes the filter.

        Args:
            event: Event to check

        Returns:
            True if the event should be dispatched
        """
        effective = self.effective_level(event)
        if effective is None:
            return False
        return event.level <= effective

    def __repr__(self) -> str:
        """String representation."""
        return f"FilterEngine(level={self._spec.global_level}, rules={list(self._spec.rules)})"
