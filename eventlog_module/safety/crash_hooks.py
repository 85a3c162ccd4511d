"""
Crash hooks for uncaught exceptions

Opt-in, process-wide installation of handlers that funnel uncaught
exceptions into a logger. This is the only place that holds a
process-wide logger reference; nothing is installed unless the host
calls ``CrashHooks.install``.
"""

from __future__ import annotations

import asyncio
import sys
import threading
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from eventlog_module.core.logger import Logger


# Source field attached to events raised by the hooks
CRASH_SOURCE = "callback"


class CrashHooks:
    """
    Installs hooks that log uncaught exceptions and flush.

    Covered:
        - sys.excepthook: uncaught exceptions in the main thread
        - threading.excepthook: uncaught exceptions in other threads
        - asyncio loop exception handler: exceptions nobody retrieved
          from a task or future, when a loop is given

    Each hook logs through the installed logger, flushes it, then
    chains to the hook that was in place before.

    Example:
        logger = LoggerBuilder().with_console().build()
        CrashHooks.install(logger)
    """

    _logger: Optional["Logger"] = None
    _previous: Dict[str, Any] = {}
    _loop: Optional[asyncio.AbstractEventLoop] = None
    _installed: bool = False

    @classmethod
    def install(
        cls,
        logger: "Logger",
        excepthook: bool = True,
        thread_hook: bool = True,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        """
        Install crash hooks that report to logger.

        Installing again replaces the logger and keeps the hooks.

        Args:
            logger: Logger receiving crash events
            excepthook: Install sys.excepthook
            thread_hook: Install threading.excepthook
            loop: Event loop whose exception handler to install
        """
        cls._logger = logger
        if cls._installed:
            return

        if excepthook:
            cls._previous["excepthook"] = sys.excepthook
            sys.excepthook = cls._exception_hook
        if thread_hook:
            cls._previous["threading"] = threading.excepthook
            threading.excepthook = cls._thread_hook
        if loop is not None:
            cls._previous["asyncio"] = loop.get_exception_handler()
            cls._loop = loop
            loop.set_exception_handler(cls._asyncio_handler)
        cls._installed = True

    @classmethod
    def uninstall(cls) -> None:
        """Restore the hooks that were in place before install()."""
        if "excepthook" in cls._previous:
            sys.excepthook = cls._previous["excepthook"]
        if "threading" in cls._previous:
            threading.excepthook = cls._previous["threading"]
        if cls._loop is not None and not cls._loop.is_closed():
            cls._loop.set_exception_handler(cls._previous.get("asyncio"))

        cls._previous = {}
        cls._loop = None
        cls._logger = None
        cls._installed = False

    @classmethod
    def is_installed(cls) -> bool:
        return cls._installed

    @classmethod
    def get_logger(cls) -> Optional["Logger"]:
        return cls._logger

    @classmethod
    def _report(cls, message: Any, error: Optional[BaseException]) -> None:
        logger = cls._logger
        if logger is None:
            return
        if error is not None:
            logger.exception(message, error, source=CRASH_SOURCE)
        else:
            logger.error(message, source=CRASH_SOURCE)
        logger.flush()

    @classmethod
    def _exception_hook(cls, exc_type: type, exc_value: BaseException, exc_tb: Any) -> None:
        """Log an uncaught exception, then chain."""
        if not issubclass(exc_type, KeyboardInterrupt):
            cls._report(None, exc_value)
        previous = cls._previous.get("excepthook") or sys.__excepthook__
        previous(exc_type, exc_value, exc_tb)

    @classmethod
    def _thread_hook(cls, args: Any) -> None:
        """Log an uncaught exception from a thread, then chain."""
        if args.exc_value is not None and not issubclass(args.exc_type, SystemExit):
            thread_name = args.thread.name if args.thread is not None else "unknown"
            cls._report(f"Uncaught exception in thread {thread_name}", args.exc_value)
        previous = cls._previous.get("threading") or threading.__excepthook__
        previous(args)

    @classmethod
    def _asyncio_handler(cls, loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
        """Log an unhandled asyncio exception, then chain."""
        message = context.get("message") or "Unhandled exception in event loop"
        cls._report(f"Unhandled asyncio exception: {message}", context.get("exception"))

        previous = cls._previous.get("asyncio")
        if previous is not None:
            previous(loop, context)
        else:
            loop.default_exception_handler(context)
