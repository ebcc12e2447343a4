"""Tests for structured logging formatters and configuration."""

import json
import logging
import sys

import pytest

from app.logging_config import (
    STRUCTURED_FIELDS_ATTR,
    JSONFormatter,
    LogFields,
    TextFormatter,
    build_logging_config,
)


def make_record(msg="encounter status updated", fields=None, exc_info=None):
    record = logging.LogRecord(
        name="app.services.resources",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    if fields is not None:
        setattr(record, STRUCTURED_FIELDS_ATTR, fields)
    return record


class TestLogFields:
    def test_extend_adds_fields(self):
        fields = LogFields(operation="GetPatient")
        fields.extend(resource_id="abc", requested_fields=["fhirId"])
        assert fields == {
            "operation": "GetPatient",
            "resource_id": "abc",
            "requested_fields": ["fhirId"],
        }

    def test_with_duration(self):
        fields = LogFields().with_duration()
        assert fields["duration_ms"] >= 0

    def test_as_extra_is_a_snapshot(self):
        fields = LogFields(operation="GetPatient")
        extra = fields.as_extra()
        fields.extend(error_code="NOT_FOUND")
        assert extra == {STRUCTURED_FIELDS_ATTR: {"operation": "GetPatient"}}

    def test_instances_are_independent(self):
        first = LogFields(operation="GetPatient")
        second = LogFields(operation="GetEncounter")
        first.extend(resource_id="a")
        assert "resource_id" not in second


class TestJSONFormatter:
    def test_merges_fields_at_top_level(self):
        line = JSONFormatter().format(make_record(fields={"matched_count": 1}))
        payload = json.loads(line)
        assert payload["level"] == "INFO"
        assert payload["logger"] == "app.services.resources"
        assert payload["msg"] == "encounter status updated"
        assert payload["matched_count"] == 1
        assert "ts" in payload

    def test_without_fields(self):
        payload = json.loads(JSONFormatter().format(make_record()))
        assert set(payload) == {"ts", "level", "logger", "msg"}

    def test_non_json_values_are_stringified(self):
        payload = json.loads(JSONFormatter().format(make_record(fields={"value": {1, 2}})))
        assert isinstance(payload["value"], str)

    def test_includes_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = make_record(exc_info=sys.exc_info())
        payload = json.loads(JSONFormatter().format(record))
        assert payload["exception"]["type"] == "ValueError"
        assert payload["exception"]["message"] == "boom"


class TestTextFormatter:
    def test_appends_key_values(self):
        line = TextFormatter().format(make_record(fields={"operation": "GetPatient"}))
        assert "[INFO] [app.services.resources] encounter status updated" in line
        assert line.endswith("operation=GetPatient")

    def test_without_fields(self):
        line = TextFormatter().format(make_record())
        assert line.endswith("encounter status updated")


class TestBuildLoggingConfig:
    @pytest.mark.parametrize("log_format,formatter", [("text", "text"), ("json", "json")])
    def test_selects_formatter(self, log_format, formatter):
        config = build_logging_config("DEBUG", log_format)
        assert config["handlers"]["console"]["formatter"] == formatter
        assert config["loggers"]["app"]["level"] == "DEBUG"

    def test_access_log_quieted(self):
        config = build_logging_config()
        assert config["loggers"]["uvicorn.access"]["level"] == "WARNING"
