"""Tests for event normalization"""

import json
import traceback

import pytest

from eventlog_module import SeverityType
from eventlog_module.core.normalizer import (
    capture_exception,
    normalize,
    normalize_directives,
    split_stack,
)
from eventlog_module.core.raw_call import (
    ErrorPayload,
    StructuredMessage,
    TextMessage,
    classify_message,
)


class CodedError(Exception):
    """Exception carrying a code attribute."""

    def __init__(self, message, code):
        super().__init__(message)
        self.code = code


def raise_and_catch(error):
    try:
        raise error
    except Exception as e:
        return e


class TestClassifyMessage:
    """Test raw call resolution."""

    def test_text(self):
        assert classify_message("hello") == TextMessage("hello")

    def test_error(self):
        error = ValueError("bad")
        assert classify_message(error) == ErrorPayload(error)

    def test_structured(self):
        assert classify_message({"a": 1}) == StructuredMessage({"a": 1})

    def test_list_is_joined(self):
        raw = classify_message(["user", 42, ValueError("bad")])
        assert raw == TextMessage("user 42 bad")

    def test_already_classified(self):
        raw = TextMessage("x")
        assert classify_message(raw) is raw


class TestNormalize:
    """Test normalize()."""

    def test_text_message(self):
        event = normalize(SeverityType.INFO, "started")
        assert event.message == "started"
        assert event.severity_type == SeverityType.INFO
        assert event.level == 0
        assert event.exception is None

    def test_severity_from_string(self):
        assert normalize("debug", "x").severity_type == SeverityType.DEBUG

    def test_trace_default_level(self):
        assert normalize(SeverityType.TRACE, "x").level == 5

    def test_caller_level_not_overridden(self):
        event = normalize(SeverityType.TRACE, "x", {"level": 1})
        assert event.level == 1
        assert "level" not in event.fields

    def test_string_level_is_coerced(self):
        assert normalize(SeverityType.INFO, "x", {"level": "3"}).level == 3

    def test_unusable_level_falls_back(self):
        assert normalize(SeverityType.TRACE, "x", {"level": "loud"}).level == 5
        assert normalize(SeverityType.INFO, "x", {"level": True}).level == 0

    def test_structured_message_is_json(self):
        event = normalize(SeverityType.INFO, {"status": 200})
        assert json.loads(event.message) == {"status": 200}

    def test_unserializable_values_are_stringified(self):
        event = normalize(SeverityType.INFO, {"when": object})
        assert "when" in event.message

    def test_circular_structure_degrades(self):
        data = []
        data.append(data)
        event = normalize(SeverityType.INFO, {"loop": data})
        assert event.message

    def test_non_mapping_context_is_kept(self):
        event = normalize(SeverityType.INFO, "x", [1, 2])
        assert "context" in event.fields

    def test_array_message(self):
        event = normalize(SeverityType.INFO, ["a", "b", {"c": 1}])
        assert event.message.startswith("a b {")

    def test_error_message(self):
        error = raise_and_catch(CodedError("denied", code="EACCES"))
        event = normalize(SeverityType.ERROR, error)

        assert event.message == "denied"
        assert event.exception.message == "denied"
        assert event.exception.code == "EACCES"
        assert event.exception.type_name == "CodedError"
        assert event.exception.stack_frames[0].startswith("Traceback")
        assert event.exception.attributes["code"] == "EACCES"

    def test_error_as_context(self):
        error = raise_and_catch(ValueError("bad input"))
        event = normalize(SeverityType.ERROR, None, error)

        assert event.message == "bad input"
        assert event.exception.message == "bad input"

    def test_error_as_context_keeps_message(self):
        error = raise_and_catch(ValueError("bad input"))
        event = normalize(SeverityType.ERROR, "parse failed", error)

        assert event.message == "parse failed"
        assert event.exception.message == "bad input"

    def test_error_without_text(self):
        event = normalize(SeverityType.ERROR, KeyError())
        assert event.message == "KeyError"

    def test_os_error_code(self):
        event = normalize(SeverityType.ERROR, FileNotFoundError(2, "missing"))
        assert event.exception.code == 2

    def test_exception_captures_handled_error(self):
        try:
            raise RuntimeError("in flight")
        except RuntimeError:
            event = normalize(SeverityType.EXCEPTION, "request failed")

        assert event.message == "request failed"
        assert event.exception.message == "in flight"

    def test_exception_without_handled_error(self):
        event = normalize(SeverityType.EXCEPTION, "nothing raised")
        assert event.exception is None

    def test_context_merge(self):
        event = normalize(
            SeverityType.INFO,
            "x",
            {"source": "db", "user": "u1"},
            base_context={"service": "api", "source": "root"},
        )
        assert event.fields == {"service": "api", "source": "db", "user": "u1"}

    def test_extra_fields_applied_last(self):
        event = normalize(SeverityType.INFO, "x", {"a": 1}, extra_fields={"a": 2})
        assert event.fields["a"] == 2

    def test_inherited_message_becomes_subject(self):
        event = normalize(
            SeverityType.INFO,
            "row inserted",
            base_context={"message": "db session"},
        )
        assert event.message == "db session"
        assert event.fields["subject"] == "row inserted"

    def test_call_subject_kept_over_text(self):
        event = normalize(
            SeverityType.INFO,
            "row inserted",
            {"subject": "orders"},
            base_context={"message": "db session"},
        )
        assert event.fields["subject"] == "orders"

        event = normalize(
            SeverityType.INFO,
            "row inserted",
            base_context={"message": "db session"},
            extra_fields={"subject": "orders"},
        )
        assert event.fields["subject"] == "orders"

    def test_text_replaces_inherited_subject(self):
        event = normalize(
            SeverityType.INFO,
            "row inserted",
            base_context={"message": "db session", "subject": "old"},
        )
        assert event.fields["subject"] == "row inserted"

    def test_message_from_context(self):
        event = normalize(SeverityType.INFO, None, {"message": "x", "level": 0, "source": "aws"})
        assert event.message == "x"
        assert event.fields == {"source": "aws"}
        assert "subject" not in event.fields

    def test_missing_message(self):
        assert normalize(SeverityType.INFO).message == ""

    def test_timestamp_recorded_at_call(self):
        first = normalize(SeverityType.INFO, "a")
        second = normalize(SeverityType.INFO, "b")
        assert first.timestamp <= second.timestamp
        assert first.timestamp.tzinfo is not None

    def test_inputs_not_mutated(self):
        context = {"message": "m", "level": 2}
        directives = {"template": "t"}
        normalize(SeverityType.INFO, "x", context, directives)
        assert context == {"message": "m", "level": 2}
        assert directives == {"template": "t"}


class TestDirectives:
    """Test directive normalization."""

    def test_empty(self):
        assert normalize_directives(None) == {}

    def test_passed_through(self):
        assert normalize_directives({"alert": "ops"}) == {"alert": "ops"}

    def test_template_implies_notify(self):
        assert normalize_directives({"template": "t"}) == {"template": "t", "notify": True}

    def test_explicit_notify_kept(self):
        result = normalize_directives({"template": "t", "notify": "email"})
        assert result["notify"] == "email"


class TestExceptionCapture:
    """Test exception snapshots."""

    def test_stack_round_trip(self):
        error = raise_and_catch(CodedError("boom", code=17))
        info = capture_exception(error)

        original = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        expected = [line.strip() for line in original.strip().splitlines() if line.strip()]

        assert info.stack.split("\n") == expected
        assert split_stack(info.stack) == info.stack_frames

    def test_serialized_round_trip(self):
        error = raise_and_catch(CodedError("boom", code=17))
        info = capture_exception(error)
        data = json.loads(json.dumps(info.to_dict()))

        assert data["message"] == "boom"
        assert data["code"] == 17
        assert "\n".join(data["stack"]).strip() == info.stack.strip()

    def test_unraised_exception(self):
        info = capture_exception(ValueError("never raised"))
        assert info.stack_frames == ("ValueError: never raised",)

    def test_private_attributes_skipped(self):
        error = ValueError("x")
        error._internal = 1
        error.public = 2
        info = capture_exception(error)
        assert dict(info.attributes) == {"public": 2}

    def test_unprintable_exception(self):
        class Unprintable(Exception):
            def __str__(self):
                raise RuntimeError("no")

        event = normalize(SeverityType.ERROR, Unprintable())
        assert event.message == "Unprintable"
        assert event.exception is not None
