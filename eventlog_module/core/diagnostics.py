"""
Last-resort reporting for failures inside the pipeline

The pipeline never logs through itself; internal failures are written
to standard error and otherwise absorbed.
"""

import sys
import traceback
from typing import Optional


def report_internal_error(message: str, error: Optional[BaseException] = None) -> None:
    """
    Write an internal failure to stderr.

    Args:
        message: Short description of what failed
        error: Exception that caused the failure, if any
    """
    stream = sys.stderr
    if stream is None:
        return
    try:
        if error is None:
            stream.write(f"eventlog: {message}\n")
        else:
            stream.write(f"eventlog: {message}: {error!r}\n")
            stream.write("".join(traceback.format_exception(type(error), error, error.__traceback__)))
        stream.flush()
    except Exception:
        # stderr itself is unusable; nothing left to report to
        pass
