"""
Safety module - Opt-in crash reporting

Provides process-wide hooks that route uncaught exceptions into a logger.
"""

from eventlog_module.safety.crash_hooks import CrashHooks, CRASH_SOURCE

__all__ = [
    "CrashHooks",
    "CRASH_SOURCE",
]
