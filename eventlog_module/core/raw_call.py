"""
Raw call variants

The message argument of a log call is resolved once, at the API
boundary, into one of three shapes. The normalizer works on these
shapes only.
"""

import json
from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class TextMessage:
    """Plain text message."""

    text: str


@dataclass(frozen=True)
class StructuredMessage:
    """Non-string value to be rendered as structured text."""

    value: Any

    def render(self) -> str:
        return render_structured(self.value)


@dataclass(frozen=True)
class ErrorPayload:
    """Exception given in place of a message."""

    error: BaseException

    def render(self) -> str:
        return exception_text(self.error)


RawMessage = Union[TextMessage, StructuredMessage, ErrorPayload]


def render_structured(value: Any) -> str:
    """
    Render a value as JSON text, degrading instead of raising.

    Values JSON does not know are stringified; circular structures fall
    back to ``repr``.
    """
    try:
        return json.dumps(value, indent=4, default=str, ensure_ascii=False)
    except (TypeError, ValueError, RecursionError):
        pass
    try:
        return repr(value)
    except Exception:
        return f"<unrepresentable {type(value).__name__}>"


def exception_text(error: BaseException) -> str:
    """Message of an exception, or its type name when it has none."""
    try:
        text = str(error)
    except Exception:
        text = ""
    return text or type(error).__name__


def render_item(item: Any) -> str:
    """Render one item of a list message."""
    if isinstance(item, str):
        return item
    if isinstance(item, BaseException):
        return exception_text(item)
    return render_structured(item)


def classify_message(message: Any) -> RawMessage:
    """
    Resolve a message argument into its variant.

    Lists and tuples are flattened into a single ``TextMessage`` whose
    items are joined with single spaces.

    Args:
        message: Message argument as given by the caller

    Returns:
        TextMessage, StructuredMessage or ErrorPayload
    """
    if isinstance(message, (TextMessage, StructuredMessage, ErrorPayload)):
        return message
    if isinstance(message, str):
        return TextMessage(message)
    if isinstance(message, BaseException):
        return ErrorPayload(message)
    if isinstance(message, (list, tuple)):
        return TextMessage(" ".join(render_item(item) for item in message))
    return StructuredMessage(message)
