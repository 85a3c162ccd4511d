"""
Text formatter with customizable template

Formats events using a template string with placeholders
"""

from eventlog_module.core.event import Event
from eventlog_module.formatters.base_formatter import BaseFormatter


class TextFormatter(BaseFormatter):
    """
    Format events using a customizable template.

    Exception stacks, when present, follow on indented lines.
    """

    DEFAULT_TEMPLATE = "[{timestamp}] [{severity:9}] {source}: {message} {fields}"

    def __init__(
        self,
        template: str = None,
        timestamp_format: str = "%Y-%m-%d %H:%M:%S.%f",
        include_stack: bool = True,
    ):
        """
        Initialize text formatter.

        Args:
            template: Format template with placeholders.
                     Available placeholders:
                     - {timestamp}: Timestamp
                     - {severity}: Severity type name
                     - {level}: Numeric level
                     - {message}: Event message
                     - {source}: Value of the ``source`` field, or "-"
                     - {fields}: Remaining fields as key=value pairs
            timestamp_format: strftime format for timestamps
            include_stack: Append exception stack frames

        Example:
            # Default format
            formatter = TextFormatter()

            # Custom format
            formatter = TextFormatter("{severity} - {message}")
        """
        self.template = template or self.DEFAULT_TEMPLATE
        self.timestamp_format = timestamp_format
        self.include_stack = include_stack

    def format(self, event: Event) -> str:
        """
        Format event using the template.

        Args:
            event: Event to format

        Returns:
            Formatted string
        """
        timestamp_str = event.timestamp.strftime(self.timestamp_format)
        if self.timestamp_format.endswith("%f"):
            timestamp_str = timestamp_str[:-3]  # milliseconds

        fields = " ".join(
            f"{key}={value}" for key, value in event.fields.items() if key != "source"
        )

        format_dict = {
            "timestamp": timestamp_str,
            "severity": event.severity_type.value,
            "level": event.level,
            "message": event.message,
            "source": event.fields.get("source", "-"),
            "fields": fields,
        }

        try:
            text = self.template.format(**format_dict).rstrip()
        except (KeyError, IndexError, ValueError) as e:
            # Fallback if template is invalid or has unknown placeholder
            return f"[FORMAT ERROR: {e}] {event.message}"

        if self.include_stack and event.exception:
            text += "".join("\n    " + line for line in event.exception.stack_frames)
        return text

    def __repr__(self) -> str:
        """String representation."""
        return f"TextFormatter(template='{self.template}')"
