"""Tests for the budget tracker logging helpers."""

import logging
from unittest.mock import MagicMock

import pytest

from src.infrastructure.logging import logger as logger_module


@pytest.fixture
def log_root(tmp_path, monkeypatch):
    """Send log files to a temporary project root with a fixed date."""
    monkeypatch.setattr(logger_module, "get_project_root", lambda: tmp_path)
    monkeypatch.setattr(
        logger_module.LoggerBuilder,
        "_today_stamp",
        staticmethod(lambda: "20240501"),
    )
    return tmp_path


def _drop_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_usage_logger_writes_to_usage_directory(log_root, monkeypatch):
    monkeypatch.setattr(logger_module.UsageLogger, "_instance", None)

    usage = logger_module.UsageLogger("budget_tracker.usage.test")

    try:
        file_handlers = [
            h for h in usage.logger.handlers if isinstance(h, logging.FileHandler)
        ]
        assert len(file_handlers) == 1
        expected = log_root / "logs" / "usage" / "20240501_usage_logs.log"
        assert file_handlers[0].baseFilename == str(expected)
        assert usage.logger.propagate is False
    finally:
        _drop_handlers(usage.logger)


def test_quiet_builder_skips_console_and_reuses_logger(log_root):
    builder = (
        logger_module.LoggerBuilder()
        .name("budget_tracker.test.quiet")
        .subdir("maintenance")
        .prefix("recalculate")
        .console(False)
        .level(logging.WARNING)
    )

    built = builder.build()

    try:
        assert built.level == logging.WARNING
        assert [type(h) for h in built.handlers] == [logging.FileHandler]
        assert built.handlers[0].formatter._fmt == logger_module.DEFAULT_FORMAT
        assert (log_root / "logs" / "maintenance").is_dir()
        assert builder.build() is built
        assert len(built.handlers) == 1
    finally:
        _drop_handlers(built)


def test_wrapper_forwards_arguments(monkeypatch):
    """Positional args and exc_info must reach the wrapped logger."""
    fake_logger = MagicMock()
    monkeypatch.setattr(
        logger_module.LoggerBuilder, "build", lambda self: fake_logger
    )
    monkeypatch.setattr(logger_module.AppLogger, "_instance", None)

    app_logger = logger_module.AppLogger("budget_tracker.app")
    app_logger.warning("Category %s is missing", "c1")
    app_logger.error("Failed to delete expense", exc_info=True)
    app_logger.info("Recalculated totals for 3 events")

    fake_logger.warning.assert_called_once_with("Category %s is missing", "c1")
    fake_logger.error.assert_called_once_with(
        "Failed to delete expense", exc_info=True
    )
    fake_logger.info.assert_called_once_with("Recalculated totals for 3 events")
    assert logger_module.AppLogger("ignored") is app_logger


def test_app_and_usage_loggers_are_separate_singletons(monkeypatch):
    built = []

    def _fake_build(self):
        built.append((self._name, self._subdir, self._prefix))
        return MagicMock()

    monkeypatch.setattr(logger_module.LoggerBuilder, "build", _fake_build)
    monkeypatch.setattr(logger_module.AppLogger, "_instance", None)
    monkeypatch.setattr(logger_module.UsageLogger, "_instance", None)

    app_logger = logger_module.get_app_logger()
    usage_logger = logger_module.get_usage_logger()

    assert logger_module.get_app_logger() is app_logger
    assert logger_module.get_usage_logger() is usage_logger
    assert app_logger is not usage_logger
    assert built == [
        ("budget_tracker.app", "app", "app_logs"),
        ("budget_tracker.usage", "usage", "usage_logs"),
    ]
