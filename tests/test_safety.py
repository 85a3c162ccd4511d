"""Tests for opt-in crash hooks"""

import asyncio
import sys
import threading
from unittest.mock import Mock

import pytest

from eventlog_module import Logger, LoggerConfig, ManualTickScheduler, SeverityType
from eventlog_module.safety import CRASH_SOURCE, CrashHooks


class MockSink:
    """Mock sink for testing."""

    def __init__(self):
        self.events = []

    def write(self, batch):
        self.events.extend(batch)


def make_logger():
    sink = MockSink()
    return Logger(LoggerConfig(sync=True), sinks=[sink]), sink


def raise_and_catch(error):
    try:
        raise error
    except Exception as e:
        return e


class TestCrashHooks:
    """Test crash hook installation."""

    def setup_method(self):
        """Reset crash hooks before each test."""
        CrashHooks.uninstall()

    def teardown_method(self):
        """Reset crash hooks after each test."""
        CrashHooks.uninstall()

    def test_not_installed_by_construction(self):
        logger, _ = make_logger()
        assert not CrashHooks.is_installed()
        assert CrashHooks.get_logger() is None
        assert sys.excepthook is not CrashHooks._exception_hook
        logger.shutdown()

    def test_install_and_uninstall(self):
        logger, _ = make_logger()
        previous_sys, previous_thread = sys.excepthook, threading.excepthook

        CrashHooks.install(logger)
        assert CrashHooks.is_installed()
        assert CrashHooks.get_logger() is logger
        assert sys.excepthook == CrashHooks._exception_hook
        assert threading.excepthook == CrashHooks._thread_hook

        CrashHooks.uninstall()
        assert sys.excepthook is previous_sys
        assert threading.excepthook is previous_thread
        logger.shutdown()

    def test_install_twice_replaces_logger(self):
        first, _ = make_logger()
        second, _ = make_logger()

        CrashHooks.install(first)
        previous = CrashHooks._previous["excepthook"]
        CrashHooks.install(second)

        assert CrashHooks.get_logger() is second
        assert CrashHooks._previous["excepthook"] is previous
        first.shutdown()
        second.shutdown()

    def test_excepthook_logs_and_chains(self):
        logger, sink = make_logger()
        chained = Mock()
        sys.excepthook, original = chained, sys.excepthook
        try:
            CrashHooks.install(logger, thread_hook=False)
            error = raise_and_catch(ValueError("uncaught"))
            sys.excepthook(type(error), error, error.__traceback__)
        finally:
            CrashHooks.uninstall()
            sys.excepthook = original

        assert len(sink.events) == 1
        event = sink.events[0]
        assert event.severity_type == SeverityType.EXCEPTION
        assert event.message == "uncaught"
        assert event.fields["source"] == CRASH_SOURCE
        assert event.exception.type_name == "ValueError"
        chained.assert_called_once()
        logger.shutdown()

    def test_excepthook_ignores_keyboard_interrupt(self):
        logger, sink = make_logger()
        chained = Mock()
        sys.excepthook, original = chained, sys.excepthook
        try:
            CrashHooks.install(logger, thread_hook=False)
            sys.excepthook(KeyboardInterrupt, KeyboardInterrupt(), None)
        finally:
            CrashHooks.uninstall()
            sys.excepthook = original

        assert sink.events == []
        chained.assert_called_once()
        logger.shutdown()

    def test_thread_hook(self):
        logger, sink = make_logger()
        chained = Mock()
        threading.excepthook, original = chained, threading.excepthook
        try:
            CrashHooks.install(logger, excepthook=False)

            def worker():
                raise RuntimeError("worker died")

            thread = threading.Thread(target=worker, name="worker-1")
            thread.start()
            thread.join()
        finally:
            CrashHooks.uninstall()
            threading.excepthook = original

        assert len(sink.events) == 1
        event = sink.events[0]
        assert event.message == "Uncaught exception in thread worker-1"
        assert event.exception.message == "worker died"
        chained.assert_called_once()
        logger.shutdown()

    def test_asyncio_handler(self):
        logger, sink = make_logger()
        loop = asyncio.new_event_loop()
        try:
            CrashHooks.install(logger, excepthook=False, thread_hook=False, loop=loop)
            chained = Mock()
            CrashHooks._previous["asyncio"] = chained

            error = raise_and_catch(ConnectionError("peer reset"))
            loop.call_exception_handler({
                "message": "Task exception was never retrieved",
                "exception": error,
            })
            chained.assert_called_once()
        finally:
            CrashHooks.uninstall()
            loop.close()

        assert len(sink.events) == 1
        event = sink.events[0]
        assert event.message.startswith("Unhandled asyncio exception: Task exception")
        assert event.exception.message == "peer reset"
        logger.shutdown()

    def test_asyncio_handler_without_exception(self):
        logger, sink = make_logger()
        loop = asyncio.new_event_loop()
        try:
            CrashHooks.install(logger, excepthook=False, thread_hook=False, loop=loop)
            loop.call_exception_handler({"message": "something odd"})
        finally:
            CrashHooks.uninstall()
            loop.close()

        assert sink.events[0].severity_type == SeverityType.ERROR
        assert sink.events[0].exception is None
        logger.shutdown()

    def test_uninstall_restores_loop_handler(self):
        logger, _ = make_logger()
        loop = asyncio.new_event_loop()
        try:
            CrashHooks.install(logger, excepthook=False, thread_hook=False, loop=loop)
            assert loop.get_exception_handler() == CrashHooks._asyncio_handler
            CrashHooks.uninstall()
            assert loop.get_exception_handler() is None
        finally:
            loop.close()
        logger.shutdown()

    def test_hook_flushes_async_logger(self):
        sink = MockSink()
        logger = Logger(LoggerConfig(), sinks=[sink], tick=ManualTickScheduler())
        logger.info("buffered")

        CrashHooks.install(logger, excepthook=False, thread_hook=False)
        CrashHooks._report(None, raise_and_catch(ValueError("late")))

        assert [e.message for e in sink.events] == ["buffered", "late"]
        logger.shutdown()
