"""
Settings and logging setup.
"""

import json
import logging
import sys

import pytest

from planboard.config import Settings
from planboard.logging_config import ColoredFormatter, JsonFormatter, get_logger, setup_logging


@pytest.fixture
def restore_planboard_logger():
    logger = logging.getLogger("planboard")
    handlers, level, propagate = logger.handlers[:], logger.level, logger.propagate
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("PLANBOARD_HISTORY_LIMIT", raising=False)
        monkeypatch.delenv("PLANBOARD_APP_ENV", raising=False)
        settings = Settings(_env_file=None)
        assert settings.history_limit == 50
        assert settings.default_hours_per_day == 9
        assert not settings.is_production

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("PLANBOARD_HISTORY_LIMIT", "5")
        monkeypatch.setenv("PLANBOARD_APP_ENV", "production")
        settings = Settings(_env_file=None)
        assert settings.history_limit == 5
        assert settings.is_production


class TestLogging:

    def test_module_loggers_are_namespaced(self):
        assert get_logger("services.board").name == "planboard.services.board"
        assert get_logger("planboard.services.board").name == "planboard.services.board"

    def test_json_lines(self, restore_planboard_logger, capsys):
        setup_logging("INFO", json_format=True)
        get_logger("tests").info("board loaded")
        get_logger("tests").debug("not shown")

        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 1
        record = json.loads(lines[0])
        assert record["level"] == "INFO"
        assert record["logger"] == "planboard.tests"
        assert record["message"] == "board loaded"

    def test_repeated_setup_keeps_one_handler(self, restore_planboard_logger):
        setup_logging("DEBUG", json_format=False)
        setup_logging("DEBUG", json_format=False)

        assert len(restore_planboard_logger.handlers) == 1
        assert isinstance(restore_planboard_logger.handlers[0].formatter, ColoredFormatter)
        assert restore_planboard_logger.level == logging.DEBUG

    def test_json_formatter_includes_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.LogRecord("planboard", logging.ERROR, __file__, 1, "failed", None, None)
            record.exc_info = sys.exc_info()

        payload = json.loads(JsonFormatter().format(record))
        assert "ValueError: boom" in payload["exception"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
