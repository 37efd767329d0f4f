"""Tests for JSON logging."""

import json
import logging
from io import StringIO

from expirable.core.logging import _JsonFormatter, get_logger, setup_logging


def test_setup_logging_creates_handler():
    """Test that setup_logging adds a handler."""
    root = logging.getLogger()
    initial_handlers = len(root.handlers)
    setup_logging()
    assert len(root.handlers) >= initial_handlers


def test_get_logger_returns_logger():
    """Test that get_logger returns a logger instance."""
    logger = get_logger("test")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "test"


def test_json_formatter_includes_cache_fields():
    """Test that logs are JSON and carry key/expired extras."""
    logger = get_logger("test.json")
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(_JsonFormatter())
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    try:
        logger.debug("cache entry removed", extra={"key": "a", "expired": True})
    finally:
        logger.removeHandler(handler)

    parsed = json.loads(stream.getvalue().strip())
    assert parsed["level"] == "DEBUG"
    assert parsed["logger"] == "test.json"
    assert parsed["msg"] == "cache entry removed"
    assert parsed["key"] == "a"
    assert parsed["expired"] is True
