"""Tests for logging setup."""

import io
import json
import logging
import sys

import pytest

from mcp_lite_server.logging_utils import JsonFormatter, configure_logging


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Undo configure_logging after each test."""
    package_logger = logging.getLogger("mcp_lite_server")
    handlers, level, propagate = list(package_logger.handlers), package_logger.level, package_logger.propagate
    yield
    package_logger.handlers = handlers
    package_logger.setLevel(level)
    package_logger.propagate = propagate


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_text_format(self):
        """Should write plain text records to the given stream."""
        stream = io.StringIO()
        configure_logging("INFO", "text", stream=stream)

        logging.getLogger("mcp_lite_server.server").info("hello %s", "world")

        output = stream.getvalue()
        assert "INFO" in output
        assert "[mcp_lite_server.server] hello world" in output

    def test_json_format(self):
        """Should write one JSON object per record."""
        stream = io.StringIO()
        configure_logging("DEBUG", "json", stream=stream)

        logging.getLogger("mcp_lite_server.registry").debug("registered", extra={"key": "echo"})

        record = json.loads(stream.getvalue())
        assert record["level"] == "DEBUG"
        assert record["logger"] == "mcp_lite_server.registry"
        assert record["message"] == "registered"
        assert record["extra"] == {"key": "echo"}

    def test_level_filters(self):
        """Records below the level are dropped."""
        stream = io.StringIO()
        configure_logging("WARNING", stream=stream)

        logging.getLogger("mcp_lite_server").info("quiet")

        assert stream.getvalue() == ""

    def test_reconfiguring_replaces_handler(self):
        """Calling twice does not duplicate output."""
        stream = io.StringIO()
        configure_logging("INFO", stream=io.StringIO())
        configure_logging("INFO", stream=stream)

        logging.getLogger("mcp_lite_server").info("once")

        assert stream.getvalue().count("once") == 1

    @pytest.mark.parametrize("level,fmt", [("LOUD", "text"), ("INFO", "xml")])
    def test_rejects_unknown_settings(self, level: str, fmt: str):
        """Should raise ValueError for unknown level or format."""
        with pytest.raises(ValueError):
            configure_logging(level, fmt)


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_includes_exception_text(self):
        """Should render exc_info."""
        try:
            raise RuntimeError("bad")
        except RuntimeError:
            record = logging.getLogger("x").makeRecord(
                "x", logging.ERROR, __file__, 1, "failed", (), exc_info=sys.exc_info()
            )

        payload = json.loads(JsonFormatter().format(record))

        assert "RuntimeError: bad" in payload["exc_info"]
