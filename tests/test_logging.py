"""Tests for logging setup.

Tests the console, JSON and file sinks configured by setup_logging.
"""

import json

import pytest
from loguru import logger

from gallery_proxy.logging import setup_logging


@pytest.fixture(autouse=True)
def reset_logger():
    """Restore a plain stderr sink after each test."""
    yield
    setup_logging(level="INFO")


class TestSetupLogging:
    """Test setup_logging function."""

    def test_writes_to_log_file(self, temp_dir):
        """Test records reach the configured log file."""
        log_file = temp_dir / "gallery.log"

        setup_logging(level="INFO", log_file=str(log_file))
        logger.info("Served page {}", 2)
        logger.remove()

        content = log_file.read_text()
        assert "Served page 2" in content
        assert "INFO" in content

    def test_level_filters_file_records(self, temp_dir):
        """Test records below the level are dropped."""
        log_file = temp_dir / "gallery.log"

        setup_logging(level="WARNING", log_file=str(log_file))
        logger.info("hidden")
        logger.warning("shown")
        logger.remove()

        content = log_file.read_text()
        assert "hidden" not in content
        assert "shown" in content

    def test_json_output(self, capsys):
        """Test JSON mode serializes each record on stderr."""
        setup_logging(level="INFO", json_output=True)
        logger.info("Cache hit")

        line = capsys.readouterr().err.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["record"]["message"] == "Cache hit"
        assert record["record"]["level"]["name"] == "INFO"

    def test_returns_logger(self):
        """Test the configured logger is returned."""
        assert setup_logging() is logger
