"""Per-step timeout strategies.

A strategy maps a step to the number of seconds it may run, or ``None`` for
no limit. User-input steps are unlimited by default: a run may wait for a
person indefinitely.
"""

from __future__ import annotations

from typing import Optional, Protocol

from ...core.config import ExecutorConfig
from ..schemas.plan import FunctionCallStep, Step, UserInputStep


class TimeoutStrategy(Protocol):
    def get_timeout(self, step: Step) -> Optional[float]: ...


class NoTimeoutStrategy:
    """Never limit step execution time."""

    def get_timeout(self, step: Step) -> Optional[float]:
        return None


class ConfigurableTimeoutStrategy:
    """Timeouts per step type, in seconds. ``None`` or ``0`` disables a limit."""

    def __init__(
        self,
        *,
        function_call: Optional[float] = 30.0,
        user_input: Optional[float] = None,
        default: Optional[float] = None,
    ) -> None:
        self.function_call = function_call or None
        self.user_input = user_input or None
        self.default = default or None

    @classmethod
    def from_config(cls, config: ExecutorConfig) -> "ConfigurableTimeoutStrategy":
        return cls(
            function_call=config.step_timeout,
            user_input=config.user_input_timeout,
            default=config.default_timeout,
        )

    def get_timeout(self, step: Step) -> Optional[float]:
        if isinstance(step, FunctionCallStep):
            return self.function_call
        if isinstance(step, UserInputStep):
            return self.user_input
        return self.default
