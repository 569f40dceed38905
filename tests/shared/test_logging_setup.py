"""Tests for structlog configuration."""

import json

import pytest
import structlog

from shared.config import Settings
from shared.logging import configure_logging


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()


class TestConfigureLogging:
    def test_json_renderer(self, capsys):
        configure_logging(Settings(log_format="json"))
        structlog.get_logger("quickbite.test").info("Order created", order_id="abc123")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        event = json.loads(line)
        assert event["event"] == "Order created"
        assert event["order_id"] == "abc123"
        assert event["level"] == "info"
        assert "timestamp" in event

    def test_level_filtering(self, capsys):
        configure_logging(Settings(log_format="json", log_level="WARNING"))
        logger = structlog.get_logger("quickbite.test")
        logger.info("hidden")
        logger.warning("shown")

        output = capsys.readouterr().out
        assert "hidden" not in output
        assert "shown" in output
