"""Settings for the plan orchestrator.

Values are read from environment variables (and an optional ``.env`` file)
through ``pydantic-settings``. The engine itself never reads settings
directly: callers build a ``Settings`` object and hand the projected
``ExecutorConfig`` to the factory functions.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _ms_to_seconds(value: int) -> Optional[float]:
    if value <= 0:
        return None
    return value / 1000.0


class ExecutorConfig(BaseModel):
    """Execution engine configuration.

    Timeouts are expressed in milliseconds; ``0`` disables the limit.
    """

    step_timeout_ms: int = Field(
        default=30000,
        ge=0,
        description="Timeout applied to each function call step",
        alias="PLAN_ORCHESTRATOR_STEP_TIMEOUT_MS",
    )
    user_input_timeout_ms: int = Field(
        default=0,
        ge=0,
        description="Timeout applied to user input steps (0 = wait indefinitely)",
        alias="PLAN_ORCHESTRATOR_USER_INPUT_TIMEOUT_MS",
    )
    default_timeout_ms: int = Field(
        default=0,
        ge=0,
        description="Timeout applied to any other step type",
        alias="PLAN_ORCHESTRATOR_DEFAULT_TIMEOUT_MS",
    )

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @property
    def step_timeout(self) -> Optional[float]:
        """Function call timeout in seconds, or None when unlimited."""
        return _ms_to_seconds(self.step_timeout_ms)

    @property
    def user_input_timeout(self) -> Optional[float]:
        return _ms_to_seconds(self.user_input_timeout_ms)

    @property
    def default_timeout(self) -> Optional[float]:
        return _ms_to_seconds(self.default_timeout_ms)


class Settings(BaseSettings):
    """Application settings loaded from the environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # Logging Configuration
    # =====================================================================
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="PLAN_ORCHESTRATOR_LOG_LEVEL",
    )
    log_format: str = Field(
        default="detailed",
        description="Log line format (simple, detailed, json)",
        alias="PLAN_ORCHESTRATOR_LOG_FORMAT",
    )
    log_file_dir: str = Field(
        default="logs",
        description="Directory for the log file when file logging is enabled",
        alias="PLAN_ORCHESTRATOR_LOG_FILE_DIR",
    )
    enable_file_logging: bool = Field(
        default=False,
        description="Write logs to <log_file_dir>/plan_orchestrator.log",
        alias="PLAN_ORCHESTRATOR_ENABLE_FILE_LOGGING",
    )

    # =====================================================================
    # Executor Configuration
    # =====================================================================
    step_timeout_ms: int = Field(
        default=30000,
        ge=0,
        description="Timeout applied to each function call step (0 = no limit)",
        alias="PLAN_ORCHESTRATOR_STEP_TIMEOUT_MS",
    )
    user_input_timeout_ms: int = Field(
        default=0,
        ge=0,
        description="Timeout applied to user input steps (0 = no limit)",
        alias="PLAN_ORCHESTRATOR_USER_INPUT_TIMEOUT_MS",
    )
    default_timeout_ms: int = Field(
        default=0,
        ge=0,
        description="Timeout applied to other step types (0 = no limit)",
        alias="PLAN_ORCHESTRATOR_DEFAULT_TIMEOUT_MS",
    )

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def executor(self) -> ExecutorConfig:
        """Get executor configuration from environment variables."""
        return ExecutorConfig.model_validate(self.model_dump(by_alias=True))
