from __future__ import annotations

"""Convenience factories for wiring the engine.

These helpers build a ``PlanExecutor`` (and a session manager on top of it)
from an explicit ``ExecutorConfig``. There is no global configuration: every
executor gets the config it was built with.
"""

from typing import Optional

from ..core.config import ExecutorConfig
from .conditions.evaluator import ConditionEvaluator, ExpressionConditionEvaluator
from .functions.base import FunctionProvider
from .inputs.base import InputAdapter
from .repos.interfaces import PlanStore, SessionStore
from .repos.memory import InMemorySessionStore
from .runtime.executor import PlanExecutor
from .runtime.runners import BaseStepRunner, ConditionalStepRunner, StepRunner
from .runtime.timeouts import ConfigurableTimeoutStrategy, TimeoutStrategy
from .session.manager import ExecutionSessionManager


def build_executor(
    *,
    function_provider: FunctionProvider,
    input_adapter: Optional[InputAdapter] = None,
    config: Optional[ExecutorConfig] = None,
    conditional: bool = True,
    condition_evaluator: Optional[ConditionEvaluator] = None,
    timeout_strategy: Optional[TimeoutStrategy] = None,
) -> PlanExecutor:
    """Construct a ``PlanExecutor``.

    Args:
        function_provider: Executes function call steps.
        input_adapter: Collects user input; required only for plans with
            input steps that are not run in pause-on-input mode.
        config: Timeout configuration; defaults to ``ExecutorConfig()``.
        conditional: Use the conditional step runner (default). With False
            condition steps fail.
        condition_evaluator: Overrides ``ExpressionConditionEvaluator``.
        timeout_strategy: Overrides the strategy derived from ``config``.
    """
    cfg = config or ExecutorConfig()
    base = BaseStepRunner(function_provider=function_provider, input_adapter=input_adapter)
    runner: StepRunner = base
    if conditional:
        runner = ConditionalStepRunner(base=base, evaluator=condition_evaluator or ExpressionConditionEvaluator())
    return PlanExecutor(
        runner=runner,
        timeout_strategy=timeout_strategy or ConfigurableTimeoutStrategy.from_config(cfg),
    )


def build_session_manager(
    *,
    function_provider: FunctionProvider,
    store: Optional[SessionStore] = None,
    plan_store: Optional[PlanStore] = None,
    config: Optional[ExecutorConfig] = None,
    input_adapter: Optional[InputAdapter] = None,
) -> ExecutionSessionManager:
    """Construct an ``ExecutionSessionManager`` over a conditional executor."""
    executor = build_executor(function_provider=function_provider, input_adapter=input_adapter, config=config)
    return ExecutionSessionManager(executor=executor, store=store or InMemorySessionStore(), plan_store=plan_store)
