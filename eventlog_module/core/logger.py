"""
Logger node - root and derived loggers

A root logger owns the filter, the pending batch and the flush schedule.
Derived loggers layer extra context on top of their parent and share
the root's pipeline.
"""

from __future__ import annotations
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple, Union
import atexit

from eventlog_module.core.diagnostics import report_internal_error
from eventlog_module.core.dispatcher import Dispatcher
from eventlog_module.core.event import Event
from eventlog_module.core.logger_config import LoggerConfig
from eventlog_module.core.normalizer import normalize
from eventlog_module.core.scheduling import TickScheduler
from eventlog_module.core.severity import SeverityType
from eventlog_module.filters.filter_engine import FilterEngine
from eventlog_module.filters.filter_spec import FilterSpec


DirectiveHandler = Callable[[Event], None]


class Logger:
    """Structured logger with context inheritance and batched delivery."""

    def __init__(
        self,
        config: Optional[LoggerConfig] = None,
        sinks: Optional[Sequence[Any]] = None,
        tick: Optional[TickScheduler] = None,
        directive_handler: Optional[DirectiveHandler] = None,
    ):
        """
        Create a root logger.

        Args:
            config: Logger configuration (default: LoggerConfig.default())
            sinks: Initial sinks, in registration order
            tick: Scheduler for deferred flushes
            directive_handler: Called with each accepted event that
                               carries directives

        Raises:
            FilterConfigError: If config.filter is malformed
        """
        self._config = config or LoggerConfig.default()
        self._root = self
        self._parent: Optional[Logger] = None
        self._own_context: Dict[str, Any] = dict(self._config.context)
        self._context: Dict[str, Any] = dict(self._own_context)

        engine = FilterEngine(FilterSpec(global_level=self._config.global_level))
        if self._config.filter is not None:
            engine.configure(self._config.filter, global_level=self._config.global_level)
        self._dispatcher = Dispatcher(engine, tick=tick, sync=self._config.sync)
        self._sinks: Tuple[Any, ...] = ()
        for sink in sinks or ():
            self.add_sink(sink)
        self._directive_handler = directive_handler
        self._closed = False

        atexit.register(self.shutdown)

    @classmethod
    def _derived(cls, parent: "Logger", context: Mapping[str, Any]) -> "Logger":
        child = cls.__new__(cls)
        child._config = parent._config
        child._root = parent._root
        child._parent = parent
        child._own_context = dict(context)
        child._context = {**parent._context, **child._own_context}
        child._sinks = parent._sinks
        return child

    # Tree

    def derive(self, context: Optional[Mapping[str, Any]] = None, **fields) -> "Logger":
        """
        Create a child logger with additional context.

        The child sees this logger's effective context overlaid with the
        new fields, and the sinks registered here at derivation time.
        Sinks added to this logger later are not seen by the child.

        Args:
            context: Fields to add
            **fields: More fields to add, applied after context

        Returns:
            New child Logger

        Example:
            db_log = log.derive({"source": "db"})
            db_log.info("connected")
        """
        own = dict(context or {})
        own.update(fields)
        return Logger._derived(self, own)

    @property
    def root(self) -> "Logger":
        return self._root

    @property
    def parent(self) -> Optional["Logger"]:
        return self._parent

    @property
    def is_root(self) -> bool:
        return self._root is self

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def context(self) -> Dict[str, Any]:
        """Copy of the effective context (root first, this node last)."""
        return dict(self._context)

    @property
    def own_context(self) -> Dict[str, Any]:
        """Copy of the fields added by this node."""
        return dict(self._own_context)

    @property
    def sinks(self) -> Tuple[Any, ...]:
        return self._sinks

    @property
    def config(self) -> LoggerConfig:
        return self._config

    @property
    def dispatcher(self) -> Dispatcher:
        return self._root._dispatcher

    @property
    def filter_engine(self) -> FilterEngine:
        return self._root._dispatcher.filter_engine

    # Setup

    def add_sink(self, sink: Any) -> None:
        """
        Add a sink to this logger.

        Args:
            sink: Object with a write(batch) method

        Raises:
            TypeError: If sink has no callable write method
        """
        if not callable(getattr(sink, "write", None)):
            raise TypeError("sink must have a callable write(batch) method")
        self.dispatcher.register_sink(sink)
        self._sinks = self._sinks + (sink,)

    def set_filter(self, spec: Union[FilterSpec, str], level: Optional[int] = None) -> FilterSpec:
        """
        Configure the tree's filter.

        Args:
            spec: FilterSpec or filter text such as "source=aws:4,web:-1"
            level: Global level to apply

        Returns:
            The specification now in effect

        Raises:
            FilterConfigError: If filter text is malformed
        """
        return self.filter_engine.configure(spec, global_level=level)

    def set_level(self, level: int) -> None:
        """Set the tree's global level."""
        self.filter_engine.set_level(level)

    def set_directive_handler(self, handler: Optional[DirectiveHandler]) -> None:
        """Set the handler receiving accepted events that carry directives."""
        self._root._directive_handler = handler

    # Logging

    def log(
        self,
        severity_type: Union[SeverityType, str],
        message: Any = None,
        context: Any = None,
        directives: Optional[Mapping[str, Any]] = None,
        **fields,
    ) -> Optional[Event]:
        """
        Log an event.

        Args:
            severity_type: Severity of the event
            message: Text, exception, list or other value
            context: Fields for this call, or an exception
            directives: Side-effect requests for the caller
            **fields: More fields for this call

        Returns:
            The accepted Event, or None if it was filtered out
        """
        root = self._root
        try:
            event = normalize(
                severity_type,
                message,
                context,
                directives,
                base_context=self._context,
                extra_fields=fields,
            )
            if not root._dispatcher.submit(event, self._sinks):
                return None
        except Exception as e:
            report_internal_error("failed to log event", e)
            return None

        if event.directives and root._directive_handler is not None:
            try:
                root._directive_handler(event)
            except Exception as e:
                report_internal_error("directive handler failed", e)
        return event

    def trace(self, message: Any = None, context: Any = None, directives=None, **fields) -> Optional[Event]:
        """Log trace message."""
        return self.log(SeverityType.TRACE, message, context, directives, **fields)

    def debug(self, message: Any = None, context: Any = None, directives=None, **fields) -> Optional[Event]:
        """Log debug message."""
        return self.log(SeverityType.DEBUG, message, context, directives, **fields)

    def info(self, message: Any = None, context: Any = None, directives=None, **fields) -> Optional[Event]:
        """Log info message."""
        return self.log(SeverityType.INFO, message, context, directives, **fields)

    def error(self, message: Any = None, context: Any = None, directives=None, **fields) -> Optional[Event]:
        """Log error message."""
        return self.log(SeverityType.ERROR, message, context, directives, **fields)

    def exception(self, message: Any = None, context: Any = None, directives=None, **fields) -> Optional[Event]:
        """
        Log an exception.

        Without an exception argument, the exception currently being
        handled is captured.
        """
        return self.log(SeverityType.EXCEPTION, message, context, directives, **fields)

    # Delivery

    def flush(self) -> int:
        """
        Flush the tree's pending events now.

        Returns:
            Number of events delivered
        """
        return self._root._dispatcher.flush()

    def shutdown(self) -> None:
        """Flush pending events and close the root's sinks."""
        root = self._root
        if root._closed:
            return

        root._closed = True
        dispatcher = root._dispatcher
        dispatcher.tick.run_pending()
        dispatcher.flush()

        for sink in root._sinks:
            for method in ("flush", "close"):
                if hasattr(sink, method):
                    try:
                        getattr(sink, method)()
                    except Exception as e:
                        report_internal_error(f"sink {sink!r} failed to {method}", e)
        atexit.unregister(root.shutdown)

    def get_metrics(self) -> dict:
        """Get dispatch metrics of the tree."""
        return self._root._dispatcher.get_stats().to_dict()

    def __repr__(self) -> str:
        kind = "root" if self.is_root else "child"
        return f"Logger(name={self.name!r}, {kind}, context={self._context!r}, sinks={len(self._sinks)})"
