from __future__ import annotations

"""Structural plan validation.

``validate_plan`` runs before any step executes. It collects every problem
it finds and raises a single ``PlanValidationError`` listing them, so a bad
plan never produces a partial trace.
"""

from typing import List, Set

from ..context import parse_step_reference
from ..errors import PlanValidationError
from ..schemas.plan import ConditionStep, FunctionCallStep, Plan, PlanStatus


def collect_plan_errors(plan: Plan) -> List[str]:
    errors: List[str] = []
    if not plan.id or not plan.id.strip():
        errors.append("Plan id must not be empty")
    if not plan.steps:
        errors.append("Plan must contain at least one step")
        return errors

    seen: Set[int] = set()
    for step in plan.steps:
        if step.step_id <= 0:
            errors.append(f"Step id must be a positive integer, got {step.step_id}")
        if step.step_id in seen:
            errors.append(f"Duplicate step id: {step.step_id}")
        seen.add(step.step_id)

    for step in plan.steps:
        if isinstance(step, ConditionStep):
            for branch_name, branch in (("on_true", step.on_true), ("on_false", step.on_false)):
                for target in branch:
                    if target == step.step_id:
                        errors.append(f"Condition step {step.step_id} cannot reference itself in {branch_name}")
                    elif target not in seen:
                        errors.append(
                            f"Condition step {step.step_id} references undefined step {target} in {branch_name}"
                        )
        elif isinstance(step, FunctionCallStep):
            for name, param in step.parameters.items():
                if param.type != "reference":
                    continue
                parsed = parse_step_reference(str(param.value))
                if parsed is None:
                    errors.append(f"Step {step.step_id} parameter '{name}' has malformed reference {param.value!r}")
                    continue
                ref_id = parsed[0]
                if ref_id not in seen:
                    errors.append(f"Step {step.step_id} parameter '{name}' references undefined step {ref_id}")
                elif ref_id >= step.step_id:
                    errors.append(f"Step {step.step_id} parameter '{name}' references later step {ref_id}")
    return errors


def validate_plan(plan: Plan) -> None:
    """
    Validate a plan before execution.

    Args:
        plan: The plan to check.

    Raises:
        PlanValidationError: If the plan is not executable or structurally invalid.
    """
    errors = collect_plan_errors(plan)
    if plan.status != PlanStatus.executable:
        errors.insert(0, f"Plan status is {plan.status.value}, expected executable")
    if errors:
        raise PlanValidationError(
            f"Plan {plan.id} is invalid: {'; '.join(errors)}",
            plan_id=plan.id,
            errors=errors,
        )
