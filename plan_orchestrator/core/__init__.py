"""
Core utilities and configuration for the plan orchestrator.

This package provides logging configuration and the settings model shared by
the engine factories.
"""

from plan_orchestrator.core.config import ExecutorConfig, Settings
from plan_orchestrator.core.logging_config import get_logger, setup_logging

__all__ = ["ExecutorConfig", "Settings", "get_logger", "setup_logging"]
