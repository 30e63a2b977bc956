"""Unit tests for structured logging."""
import json
import logging

from pdf_notebook.logger import JSONFormatter, setup_logging


def make_record(**extra):
    record = logging.LogRecord("pdf_notebook.test", logging.WARNING, __file__, 1, "hello %s", ("world",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Test suite for JSONFormatter."""

    def test_basic_fields(self):
        """Test the core fields are emitted as JSON."""
        data = json.loads(JSONFormatter().format(make_record()))

        assert data["level"] == "WARNING"
        assert data["logger"] == "pdf_notebook.test"
        assert data["message"] == "hello world"
        assert data["timestamp"].endswith("Z")
        assert "args" not in data

    def test_extra_fields(self):
        """Test fields passed through extra= are included."""
        record = make_record(error_code="SERVICE_ERROR", error_details={"status_code": 500})

        data = json.loads(JSONFormatter().format(record))

        assert data["error_code"] == "SERVICE_ERROR"
        assert data["error_details"] == {"status_code": 500}

    def test_exception_info(self):
        """Test exception tracebacks are captured."""
        try:
            raise RuntimeError("kaboom")
        except RuntimeError:
            import sys
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

        data = json.loads(JSONFormatter().format(record))

        assert "RuntimeError: kaboom" in data["exception"]


def test_setup_logging_installs_single_json_handler():
    """Test repeated setup does not stack JSON handlers."""
    root = logging.getLogger()
    original_level = root.level
    try:
        setup_logging("DEBUG")
        setup_logging("DEBUG")

        json_handlers = [h for h in root.handlers if isinstance(h.formatter, JSONFormatter)]
        assert len(json_handlers) == 1
        assert root.level == logging.DEBUG
    finally:
        for handler in [h for h in root.handlers if isinstance(h.formatter, JSONFormatter)]:
            root.removeHandler(handler)
        root.setLevel(original_level)
