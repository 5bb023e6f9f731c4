"""
Structured logging tests
"""

import json
import logging

import pytest

from venue_admin.core.logging import JSONFormatter, RequestContextFilter, build_log_config, request_id_var

pytestmark = pytest.mark.unit


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("venue_admin.services.venue_service", logging.INFO, __file__, 10, "Venue created", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestRequestContext:

    def test_filter_stamps_current_request_id(self):
        token = request_id_var.set("req-42")
        try:
            record = make_record()
            assert RequestContextFilter().filter(record)
        finally:
            request_id_var.reset(token)
        assert record.request_id == "req-42"

    def test_explicit_request_id_kept(self):
        token = request_id_var.set("req-42")
        try:
            record = make_record(request_id="req-explicit")
            RequestContextFilter().filter(record)
        finally:
            request_id_var.reset(token)
        assert record.request_id == "req-explicit"

    def test_outside_a_request(self):
        record = make_record()
        RequestContextFilter().filter(record)
        assert record.request_id is None


class TestJSONFormatter:

    def test_includes_venue_context(self):
        record = make_record(request_id="req-1", venue_id="venue-9", step="images")
        data = json.loads(JSONFormatter().format(record))
        assert data["message"] == "Venue created"
        assert data["level"] == "INFO"
        assert data["request_id"] == "req-1"
        assert data["venue_id"] == "venue-9"
        assert data["step"] == "images"

    def test_omits_missing_context(self):
        data = json.loads(JSONFormatter().format(make_record()))
        assert "venue_id" not in data
        assert "request_id" not in data


def test_no_file_handler_when_testing():
    config = build_log_config()
    assert "file" not in config["handlers"]
    assert config["loggers"]["venue_admin"]["handlers"] == ["console"]
