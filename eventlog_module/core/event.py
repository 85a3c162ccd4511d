"""
Event record data structures

Canonical shape of a log call after normalization. Events are immutable
once created; the fields and directives mappings are read-only views.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from eventlog_module.core.severity import SeverityType


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ExceptionInfo:
    """
    Snapshot of an exception carried by an event.

    The stack is kept as a sequence of trimmed, non-empty lines.
    """

    type_name: str
    message: str
    code: Any = None
    stack_frames: Tuple[str, ...] = ()
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "stack_frames", tuple(self.stack_frames))
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    @property
    def stack(self) -> str:
        """Stack frames rejoined into one text block."""
        return "\n".join(self.stack_frames)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type_name,
            "message": self.message,
            "code": self.code,
            "stack": list(self.stack_frames),
            "attributes": dict(self.attributes),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExceptionInfo":
        return cls(
            type_name=data.get("type", "Exception"),
            message=data.get("message", ""),
            code=data.get("code"),
            stack_frames=tuple(data.get("stack", ())),
            attributes=data.get("attributes", {}),
        )


@dataclass(frozen=True)
class Event:
    """
    Normalized log event.

    Attributes:
        message: Human-readable summary
        severity_type: Coarse category of the call
        level: Numeric verbosity rank, lower is shown more readily
        fields: Merged context of the emitting logger and the call
        timestamp: Time the call was made (not the time of delivery)
        exception: Exception snapshot when the call carried one
        directives: Side-effect requests passed through to the caller
    """

    message: str
    severity_type: SeverityType = SeverityType.INFO
    level: int = 0
    fields: Mapping[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=_utcnow)
    exception: Optional[ExceptionInfo] = None
    directives: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate event and freeze its mappings."""
        if not isinstance(self.severity_type, SeverityType):
            raise TypeError("severity_type must be SeverityType enum")
        if not isinstance(self.message, str):
            object.__setattr__(self, "message", str(self.message))
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))
        object.__setattr__(self, "directives", MappingProxyType(dict(self.directives)))

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert event to dictionary.

        Returns:
            Dictionary representation
        """
        return {
            "message": self.message,
            "severity": self.severity_type.value,
            "level": self.level,
            "timestamp": self.timestamp.isoformat(),
            "fields": dict(self.fields),
            "exception": self.exception.to_dict() if self.exception else None,
            "directives": dict(self.directives),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Event":
        """
        Create event from dictionary.

        Args:
            data: Dictionary with event data

        Returns:
            New Event instance
        """
        exception = data.get("exception")
        return cls(
            message=data["message"],
            severity_type=SeverityType.from_string(data.get("severity", "info")),
            level=data.get("level", 0),
            fields=data.get("fields", {}),
            timestamp=datetime.fromisoformat(data["timestamp"]),
            exception=ExceptionInfo.from_dict(exception) if exception else None,
            directives=data.get("directives", {}),
        )

    def __str__(self) -> str:
        """String representation."""
        source = self.fields.get("source")
        origin = f"{source}: " if source is not None else ""
        return (
            f"[{self.timestamp.strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]}] "
            f"[{self.severity_type.value:9}] "
            f"{origin}{self.message}"
        )
