"""Logger builder pattern"""

from typing import Any, Dict, Optional, Union

from eventlog_module.core.logger import DirectiveHandler, Logger
from eventlog_module.core.logger_config import LoggerConfig
from eventlog_module.core.scheduling import TickScheduler
from eventlog_module.filters.filter_parser import parse_filter
from eventlog_module.filters.filter_spec import FilterSpec
from eventlog_module.sinks.console_sink import ConsoleSink


class LoggerBuilder:
    """Builder pattern for root logger construction."""

    def __init__(self):
        self._config = LoggerConfig()
        self._sync: Optional[bool] = None
        self._console_enabled = False
        self._console_stream = None
        self._console_formatter = None
        self._custom_sinks = []
        self._context: Dict[str, Any] = {}
        self._tick: Optional[TickScheduler] = None
        self._directive_handler: Optional[DirectiveHandler] = None

    def with_name(self, name: str) -> "LoggerBuilder":
        """Set logger name."""
        self._config.name = name
        return self

    def with_level(self, level: int) -> "LoggerBuilder":
        """Set global level."""
        self._config.global_level = int(level)
        return self

    def with_filter(self, spec: Union[FilterSpec, str]) -> "LoggerBuilder":
        """
        Set the filter specification.

        Filter text is parsed here, so malformed text fails at setup.

        Args:
            spec: FilterSpec or filter text

        Returns:
            Self for method chaining

        Raises:
            FilterConfigError: If filter text is malformed

        Example:
            logger = (LoggerBuilder()
                .with_level(0)
                .with_filter("source=aws:4,web:-1")
                .build())
        """
        if isinstance(spec, str):
            spec = parse_filter(spec)
        self._config.filter = spec
        return self

    def with_context(self, context: Optional[Dict[str, Any]] = None, **fields) -> "LoggerBuilder":
        """Add fields carried by every event of the tree."""
        self._context.update(context or {})
        self._context.update(fields)
        return self

    def with_sync(self, enabled: bool = True) -> "LoggerBuilder":
        """Enable/disable inline (synchronous) flushing."""
        self._sync = enabled
        return self

    def with_console(self, colored: bool = True, stream=None, formatter=None) -> "LoggerBuilder":
        """Enable console output."""
        self._console_enabled = True
        self._config.colored_output = colored
        self._console_stream = stream
        self._console_formatter = formatter
        return self

    def add_sink(self, sink) -> "LoggerBuilder":
        """
        Add a custom sink.

        Args:
            sink: Sink instance with write(batch) method

        Returns:
            Self for method chaining
        """
        self._custom_sinks.append(sink)
        return self

    def with_tick(self, tick: TickScheduler) -> "LoggerBuilder":
        """Set the scheduler used for deferred flushes."""
        self._tick = tick
        return self

    def with_directive_handler(self, handler: DirectiveHandler) -> "LoggerBuilder":
        """Set the handler receiving accepted events that carry directives."""
        self._directive_handler = handler
        return self

    def build(self) -> Logger:
        """
        Build and return configured root logger.

        A logger whose only sink is the console flushes synchronously
        unless with_sync() said otherwise.
        """
        sync = self._sync
        if sync is None:
            sync = self._console_enabled and not self._custom_sinks

        config = LoggerConfig(
            name=self._config.name,
            sync=sync,
            global_level=self._config.global_level,
            filter=self._config.filter,
            context=dict(self._context),
            colored_output=self._config.colored_output,
        )

        sinks = []
        if self._console_enabled:
            sinks.append(ConsoleSink(
                colored=config.colored_output,
                stream=self._console_stream,
                formatter=self._console_formatter,
            ))
        sinks.extend(self._custom_sinks)

        return Logger(
            config,
            sinks=sinks,
            tick=self._tick,
            directive_handler=self._directive_handler,
        )
