from __future__ import annotations

"""Step runners.

A step runner knows how to execute one step against an
``ExecutionContext``. The executor owns the loop and delegates each step to
a runner:

- ``BaseStepRunner`` executes function call and user input steps. It cannot
  evaluate conditions and fails condition steps.
- ``ConditionalStepRunner`` evaluates condition steps and delegates every
  other step type to a wrapped ``BaseStepRunner``.

Runners never raise for step-level problems: provider failures, coercion
errors and a missing input adapter all come back as failed results.
"""

import logging
from typing import Any, Dict, Optional, Protocol, assert_never

from ..conditions.evaluator import ConditionEvaluator
from ..context import ExecutionContext
from ..errors import FunctionExecutionError, OrchestratorError
from ..functions.base import FunctionProvider
from ..inputs.base import InputAdapter, surface_id_for
from ..inputs.coercion import collect_form_values
from ..schemas.plan import ConditionStep, FunctionCallStep, Step, UserInputStep
from ..schemas.results import (
    ConditionalResult,
    ExecutedBranch,
    FunctionCallResult,
    StepResult,
    UserInputResult,
)
from .branching import split_branches

logger = logging.getLogger(__name__)

MISSING_INPUT_ADAPTER = "User input step requires an input adapter, but none was provided to the executor"
CONDITION_UNSUPPORTED_BY_BASE = "Condition step requires a conditional step runner"


def failed_result_for(step: Step, error: str, *, parameters: Optional[Dict[str, Any]] = None) -> StepResult:
    """Build a failed result of the right shape for ``step``."""
    if isinstance(step, FunctionCallStep):
        return FunctionCallResult(
            step_id=step.step_id,
            function_name=step.function_name,
            parameters=dict(parameters or {}),
            success=False,
            error=error,
        )
    if isinstance(step, UserInputStep):
        return UserInputResult(step_id=step.step_id, values={}, success=False, error=error)
    if isinstance(step, ConditionStep):
        return ConditionalResult(
            step_id=step.step_id,
            condition=step.condition,
            evaluated_result=False,
            executed_branch=ExecutedBranch.none,
            success=False,
            error=error,
        )
    assert_never(step)


class StepRunner(Protocol):
    async def run(self, step: Step, context: ExecutionContext) -> StepResult: ...


class BaseStepRunner:
    """Execute function call and user input steps."""

    def __init__(self, *, function_provider: FunctionProvider, input_adapter: Optional[InputAdapter] = None) -> None:
        self._functions = function_provider
        self._input_adapter = input_adapter

    async def run(self, step: Step, context: ExecutionContext) -> StepResult:
        if isinstance(step, FunctionCallStep):
            return await self.run_function_call(step, context)
        if isinstance(step, UserInputStep):
            return await self.run_user_input(step, context)
        if isinstance(step, ConditionStep):
            return failed_result_for(step, CONDITION_UNSUPPORTED_BY_BASE)
        assert_never(step)

    async def run_function_call(self, step: FunctionCallStep, context: ExecutionContext) -> FunctionCallResult:
        params = context.resolve_parameters(step.parameters)
        logger.debug(f"Calling function '{step.function_name}' for step {step.step_id} with {params}")
        try:
            outcome = await self._functions.execute(step.function_name, params)
        except Exception as e:
            err = FunctionExecutionError(step.function_name, str(e) or type(e).__name__, parameters=params)
        else:
            if outcome.success:
                return FunctionCallResult(
                    step_id=step.step_id,
                    function_name=step.function_name,
                    parameters=params,
                    result=outcome.result,
                    success=True,
                )
            err = FunctionExecutionError(step.function_name, outcome.error or "unknown error", parameters=params)
        logger.error(f"Step {step.step_id}: {err.message} (parameters={err.parameters})")
        return FunctionCallResult(
            step_id=step.step_id,
            function_name=step.function_name,
            parameters=params,
            success=False,
            error=err.message,
        )

    async def run_user_input(self, step: UserInputStep, context: ExecutionContext) -> UserInputResult:
        if self._input_adapter is None:
            logger.error(f"Step {step.step_id}: {MISSING_INPUT_ADAPTER}")
            return UserInputResult(step_id=step.step_id, values={}, success=False, error=MISSING_INPUT_ADAPTER)

        surface_id = surface_id_for(step.step_id)
        logger.info(f"Requesting user input for step {step.step_id} on surface {surface_id}")
        answers: Dict[str, Any] = {}
        try:
            for field in step.field_schema.fields:
                payload = await self._input_adapter.request_input(surface_id, field)
                answers[field.id] = payload.get(field.id) if payload is not None else None
            values, skipped = collect_form_values(step.field_schema, answers)
        except OrchestratorError as e:
            logger.error(f"User input failed for step {step.step_id}: {e.message}")
            return UserInputResult(step_id=step.step_id, values={}, success=False, error=e.message)
        except Exception as e:
            logger.error(f"User input failed for step {step.step_id}: {e}")
            return UserInputResult(step_id=step.step_id, values={}, success=False, error=str(e) or type(e).__name__)

        if skipped:
            logger.info(f"User input for step {step.step_id} skipped")
        else:
            logger.info(f"User input received for step {step.step_id} ({len(values)} fields)")
        return UserInputResult(step_id=step.step_id, values=values, skipped=skipped, success=True)


class ConditionalStepRunner:
    """Evaluate condition steps; delegate everything else to ``base``."""

    def __init__(self, *, base: BaseStepRunner, evaluator: ConditionEvaluator) -> None:
        self._base = base
        self._evaluator = evaluator

    async def run(self, step: Step, context: ExecutionContext) -> StepResult:
        if isinstance(step, ConditionStep):
            return self.run_condition(step, context)
        return await self._base.run(step, context)

    def run_condition(self, step: ConditionStep, context: ExecutionContext) -> ConditionalResult:
        if not self._evaluator.supports(step.condition):
            logger.error(f"Step {step.step_id}: unsupported condition expression {step.condition!r}")
            return ConditionalResult(
                step_id=step.step_id,
                condition=step.condition,
                evaluated_result=False,
                executed_branch=ExecutedBranch.none,
                success=False,
                error=f"Unsupported condition expression: {step.condition}",
            )

        value = self._evaluator.evaluate(step.condition, context)
        branch, _, skipped = split_branches(step, value)
        if step.output_variable:
            context.set_variable(step.output_variable, value)
        logger.debug(f"Condition step {step.step_id} ({step.condition!r}) -> {value}, running {branch.value}")
        return ConditionalResult(
            step_id=step.step_id,
            condition=step.condition,
            evaluated_result=value,
            executed_branch=branch,
            skipped_steps=skipped,
            success=True,
        )
