"""
Event normalizer

Turns the arguments of a log call into a canonical Event. Normalization
is a pure transform apart from the timestamp, which is recorded here, at
the call site, rather than when the event is flushed.
"""

from __future__ import annotations

import sys
import traceback
from collections.abc import Mapping
from typing import Any, Dict, Optional, Union

from eventlog_module.core.event import Event, ExceptionInfo
from eventlog_module.core.raw_call import (
    ErrorPayload,
    StructuredMessage,
    TextMessage,
    classify_message,
    exception_text,
    render_item,
    render_structured,
)
from eventlog_module.core.severity import SeverityType


# Directive that implies a notification was requested
TEMPLATE_DIRECTIVE = "template"
NOTIFY_DIRECTIVE = "notify"

# Field holding the call's text when the message itself is inherited
SUBJECT_FIELD = "subject"


def normalize(
    severity_type: Union[SeverityType, str],
    message: Any = None,
    context: Any = None,
    directives: Optional[Mapping] = None,
    base_context: Optional[Mapping] = None,
    extra_fields: Optional[Mapping] = None,
) -> Event:
    """
    Build an Event from raw call arguments.

    Args:
        severity_type: Severity of the call
        message: Text, exception, list or any other value
        context: Mapping of fields for this call, or an exception
        directives: Side-effect requests carried through untouched
        base_context: Effective context of the emitting logger
        extra_fields: Keyword fields of the call, applied after context

    Returns:
        Normalized Event

    Note:
        Unexpected input shapes degrade to a best-effort rendering; this
        function does not raise for them.
    """
    if not isinstance(severity_type, SeverityType):
        severity_type = SeverityType.from_string(str(severity_type))

    error: Optional[BaseException] = None
    if isinstance(context, BaseException):
        error = context
        context = None
    call_fields = _coerce_context(context)

    text: Optional[str] = None
    if message is not None:
        raw = classify_message(message)
        if isinstance(raw, ErrorPayload):
            error = raw.error
            text = raw.render()
        elif isinstance(raw, StructuredMessage):
            text = raw.render()
        elif isinstance(raw, TextMessage):
            text = raw.text

    if error is None and severity_type is SeverityType.EXCEPTION:
        error = sys.exc_info()[1]
    if text is None and error is not None:
        text = exception_text(error)

    fields: Dict[str, Any] = dict(base_context or {})
    fields.update(call_fields)
    if extra_fields:
        fields.update(extra_fields)

    if "message" in fields:
        event_message = render_item(fields.pop("message"))
        # A subject given with this call wins over the call's own text
        call_subject = SUBJECT_FIELD in call_fields or SUBJECT_FIELD in (extra_fields or {})
        if text is not None and not call_subject:
            fields[SUBJECT_FIELD] = text
    else:
        event_message = text if text is not None else ""

    level = _coerce_level(fields.pop("level", None))
    if level is None:
        level = severity_type.default_level

    return Event(
        message=event_message,
        severity_type=severity_type,
        level=level,
        fields=fields,
        exception=capture_exception(error) if error is not None else None,
        directives=normalize_directives(directives),
    )


def capture_exception(error: BaseException) -> ExceptionInfo:
    """
    Snapshot an exception.

    The formatted traceback is split into trimmed, non-empty lines.
    Public instance attributes are shallow-copied.

    Args:
        error: Exception to capture

    Returns:
        ExceptionInfo snapshot
    """
    try:
        lines = traceback.format_exception(type(error), error, error.__traceback__)
        stack_text = "".join(lines)
    except Exception:
        stack_text = f"{type(error).__name__}: {exception_text(error)}"

    code = getattr(error, "code", None)
    if code is None and isinstance(error, OSError):
        code = error.errno

    attributes = {
        key: value
        for key, value in getattr(error, "__dict__", {}).items()
        if not key.startswith("_")
    }

    return ExceptionInfo(
        type_name=type(error).__name__,
        message=exception_text(error),
        code=code,
        stack_frames=split_stack(stack_text),
        attributes=attributes,
    )


def split_stack(stack_text: str) -> tuple:
    """Split stack text into trimmed, non-empty lines."""
    return tuple(line.strip() for line in stack_text.splitlines() if line.strip())


def normalize_directives(directives: Optional[Mapping]) -> Dict[str, Any]:
    """
    Copy directives, applying the template-implies-notify rule.

    Args:
        directives: Caller-supplied directives or None

    Returns:
        New directives dictionary
    """
    if not directives:
        return {}
    result = dict(directives)
    if TEMPLATE_DIRECTIVE in result:
        result.setdefault(NOTIFY_DIRECTIVE, True)
    return result


def _coerce_context(context: Any) -> Dict[str, Any]:
    if context is None:
        return {}
    if isinstance(context, Mapping):
        return {str(key): value for key, value in context.items()}
    # Not a mapping: keep it, rendered, rather than dropping it
    return {"context": render_structured(context)}


def _coerce_level(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None
