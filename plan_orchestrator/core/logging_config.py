"""
Logging setup for the plan orchestrator.

Engine modules only create loggers with ``logging.getLogger(__name__)``.
Nothing is configured on import: an application builds its ``Settings``
and calls ``setup_logging(settings)`` once at startup. Keyword arguments
override individual settings values.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from plan_orchestrator.core.config import Settings

LOG_FILE_NAME = "plan_orchestrator.log"

SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s"

JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"module": "%(filename)s", "function": "%(funcName)s", "line": %(lineno)d, '
    '"message": "%(message)s"}'
)

# Per-package levels applied after the handlers are attached.
MODULE_LOG_LEVELS = {
    "plan_orchestrator.engine": "DEBUG",
    "plan_orchestrator.engine.runtime": "DEBUG",
    "plan_orchestrator.engine.conditions": "INFO",
    "plan_orchestrator.engine.session": "DEBUG",
    "plan_orchestrator.engine.repos": "INFO",
    "plan_orchestrator.engine.functions": "INFO",
    # Third-party noise
    "asyncio": "WARNING",
    "langgraph": "WARNING",
}


def _format_string(fmt: str) -> str:
    if fmt == "json":
        return JSON_FORMAT
    if fmt == "simple":
        return SIMPLE_FORMAT
    return DETAILED_FORMAT


def setup_logging(
    settings: Optional[Settings] = None,
    *,
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: Optional[bool] = None,
    log_file_dir: Optional[str] = None,
) -> None:
    """
    Attach console (and optionally file) handlers to the root logger.

    Args:
        settings: Source of the defaults. Without it the ``Settings`` field
            defaults apply (INFO, detailed format, no file logging); the
            environment is not read.
        log_level: Console level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Line format (simple, detailed, json).
        enable_file: Also write DEBUG and above to ``<log_file_dir>/plan_orchestrator.log``.
        log_file_dir: Directory of the log file, created when missing.
    """
    base = settings if settings is not None else Settings.model_construct()
    level = (log_level or base.log_level).upper()
    fmt = log_format or base.log_format
    file_logging = base.enable_file_logging if enable_file is None else enable_file
    file_dir = Path(log_file_dir or base.log_file_dir)

    formatter = logging.Formatter(_format_string(fmt), datefmt="%Y-%m-%d %H:%M:%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # handlers filter

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if file_logging:
        file_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(file_dir / LOG_FILE_NAME)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    for module_name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(module_name).setLevel(module_level)

    root_logger.info(f"Logging configured: level={level}, format={fmt}, file_logging={file_logging}")


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name`` (typically ``__name__``)."""
    return logging.getLogger(name)
