"""Unit tests for logging configuration module.

Tests verify that the logging configuration functions work correctly with different
log levels, formats, and file logging options.
"""

import logging
import tempfile
from pathlib import Path

import pytest

from plan_orchestrator.core.config import Settings
from plan_orchestrator.core.logging_config import (
    DETAILED_FORMAT,
    JSON_FORMAT,
    LOG_FILE_NAME,
    MODULE_LOG_LEVELS,
    SIMPLE_FORMAT,
    get_logger,
    setup_logging,
)


def _console_handler():
    root_logger = logging.getLogger()
    return next(
        (
            h
            for h in root_logger.handlers
            if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        ),
        None,
    )


class TestSetupLoggingLogLevels:
    """Test setup_logging with different log levels."""

    @pytest.mark.parametrize(
        "log_level,expected_level",
        [
            ("DEBUG", logging.DEBUG),
            ("INFO", logging.INFO),
            ("WARNING", logging.WARNING),
            ("ERROR", logging.ERROR),
            ("CRITICAL", logging.CRITICAL),
            ("debug", logging.DEBUG),
            ("info", logging.INFO),
        ],
    )
    def test_setup_logging_with_different_levels(self, log_level, expected_level):
        setup_logging(log_level=log_level, enable_file=False)

        console_handler = _console_handler()
        assert console_handler is not None
        assert console_handler.level == expected_level

    def test_root_logger_level_is_debug(self):
        setup_logging(log_level="ERROR", enable_file=False)

        assert logging.getLogger().level == logging.DEBUG


class TestSetupLoggingFormats:
    """Test setup_logging with different log formats."""

    @pytest.mark.parametrize(
        "log_format,expected_format",
        [
            ("simple", SIMPLE_FORMAT),
            ("detailed", DETAILED_FORMAT),
            ("json", JSON_FORMAT),
            ("unknown", DETAILED_FORMAT),
        ],
    )
    def test_setup_logging_with_different_formats(self, log_format, expected_format):
        setup_logging(log_format=log_format, enable_file=False)

        console_handler = _console_handler()
        assert console_handler is not None
        assert console_handler.formatter._fmt == expected_format
        assert console_handler.formatter.datefmt == "%Y-%m-%d %H:%M:%S"


class TestSetupLoggingFileHandling:
    """Test setup_logging file logging functionality."""

    @staticmethod
    def _file_handler():
        return next((h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)), None)

    def test_explicit_file_logging(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            setup_logging(enable_file=True, log_file_dir=tmpdir)

            file_handler = self._file_handler()
            assert file_handler is not None
            assert file_handler.level == logging.DEBUG
            assert Path(file_handler.baseFilename) == Path(tmpdir) / LOG_FILE_NAME

            file_handler.close()
            setup_logging(enable_file=False)

    def test_file_logging_from_settings(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            log_dir = Path(tmpdir) / "nested" / "logs"
            settings = Settings(
                PLAN_ORCHESTRATOR_ENABLE_FILE_LOGGING=True,
                PLAN_ORCHESTRATOR_LOG_FILE_DIR=str(log_dir),
                PLAN_ORCHESTRATOR_LOG_LEVEL="warning",
            )
            setup_logging(settings)

            assert log_dir.is_dir()
            assert self._file_handler() is not None
            assert _console_handler().level == logging.WARNING

            self._file_handler().close()
            setup_logging(enable_file=False)

    def test_argument_overrides_settings(self):
        settings = Settings(PLAN_ORCHESTRATOR_ENABLE_FILE_LOGGING=True, PLAN_ORCHESTRATOR_LOG_FORMAT="json")

        setup_logging(settings, enable_file=False, log_format="simple")

        assert self._file_handler() is None
        assert _console_handler().formatter._fmt == SIMPLE_FORMAT

    def test_no_file_logging_by_default(self, monkeypatch):
        monkeypatch.setenv("PLAN_ORCHESTRATOR_ENABLE_FILE_LOGGING", "true")

        setup_logging()

        assert self._file_handler() is None
        assert _console_handler().level == logging.INFO


class TestSetupLoggingHandlerManagement:
    def test_setup_logging_removes_existing_handlers(self):
        root_logger = logging.getLogger()
        dummy = logging.StreamHandler()
        root_logger.addHandler(dummy)

        setup_logging(enable_file=False)

        assert dummy not in root_logger.handlers
        assert len(root_logger.handlers) == 1


class TestSetupLoggingModuleSpecificLevels:
    @pytest.mark.parametrize(
        "module_name,expected_level",
        [
            ("plan_orchestrator.engine", logging.DEBUG),
            ("plan_orchestrator.engine.conditions", logging.INFO),
            ("plan_orchestrator.engine.repos", logging.INFO),
            ("asyncio", logging.WARNING),
            ("langgraph", logging.WARNING),
        ],
    )
    def test_module_specific_log_levels(self, module_name, expected_level):
        setup_logging(enable_file=False)

        assert logging.getLogger(module_name).level == expected_level

    def test_all_module_log_levels_configured(self):
        setup_logging(enable_file=False)

        for module_name, module_level in MODULE_LOG_LEVELS.items():
            assert logging.getLogger(module_name).level == logging.getLevelName(module_level)


class TestGetLogger:
    def test_get_logger_returns_logger_instance(self):
        assert isinstance(get_logger("plan_orchestrator.test"), logging.Logger)

    def test_get_logger_same_name_returns_same_instance(self):
        assert get_logger("plan_orchestrator.engine.runtime") is get_logger("plan_orchestrator.engine.runtime")

    def test_get_logger_inherits_module_level(self):
        setup_logging(enable_file=False)

        logger = get_logger("plan_orchestrator.engine.session.manager")
        assert logger.getEffectiveLevel() == logging.DEBUG
