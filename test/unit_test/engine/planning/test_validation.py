from __future__ import annotations

from typing import Any, Dict, List

import pytest

from plan_orchestrator.engine.errors import PlanValidationError
from plan_orchestrator.engine.planning.validation import collect_plan_errors, validate_plan
from plan_orchestrator.engine.schemas.plan import Plan


def _plan(steps: List[Dict[str, Any]], **extra: Any) -> Plan:
    return Plan.model_validate({"id": "plan-1", "user_request": "test", "steps": steps, **extra})


def _add(step_id: int, a: Any = 1, b: Any = 2) -> Dict[str, Any]:
    def _param(v: Any) -> Dict[str, Any]:
        if isinstance(v, str) and v.startswith("step."):
            return {"type": "reference", "value": v}
        return {"type": "literal", "value": v}

    return {
        "type": "function_call",
        "step_id": step_id,
        "function_name": "add",
        "parameters": {"a": _param(a), "b": _param(b)},
    }


def test_valid_plan_passes():
    plan = _plan(
        [
            _add(1),
            {"type": "condition", "step_id": 2, "condition": "step.1.result > 1", "on_true": [3], "on_false": [4]},
            _add(3, "step.1.result"),
            _add(4, "step.1.result.total"),
        ]
    )

    validate_plan(plan)
    assert collect_plan_errors(plan) == []


def test_branch_reference_to_undefined_step_names_condition():
    plan = _plan(
        [
            _add(1),
            {"type": "condition", "step_id": 2, "condition": "step.1.result > 1", "on_true": [99], "on_false": []},
        ]
    )

    with pytest.raises(PlanValidationError) as exc_info:
        validate_plan(plan)

    assert "Condition step 2" in str(exc_info.value)
    assert "99" in str(exc_info.value)
    assert exc_info.value.plan_id == "plan-1"
    assert exc_info.value.code == "PLAN_VALIDATION_ERROR"


def test_duplicate_step_ids_rejected():
    with pytest.raises(PlanValidationError, match="Duplicate step id: 1"):
        validate_plan(_plan([_add(1), _add(1)]))


@pytest.mark.parametrize("step_id", [0, -3])
def test_non_positive_step_ids_rejected(step_id):
    with pytest.raises(PlanValidationError, match="positive integer"):
        validate_plan(_plan([_add(step_id)]))


def test_empty_plan_rejected():
    with pytest.raises(PlanValidationError, match="at least one step"):
        validate_plan(_plan([]))


def test_condition_cannot_reference_itself():
    plan = _plan([{"type": "condition", "step_id": 1, "condition": "true", "on_true": [1], "on_false": []}])

    with pytest.raises(PlanValidationError, match="cannot reference itself"):
        validate_plan(plan)


def test_parameter_reference_must_point_to_earlier_step():
    plan = _plan([_add(1, "step.2.result"), _add(2)])

    errors = collect_plan_errors(plan)

    assert errors == ["Step 1 parameter 'a' references later step 2"]


def test_parameter_reference_to_missing_step():
    errors = collect_plan_errors(_plan([_add(1), _add(2, "step.5.result")]))

    assert errors == ["Step 2 parameter 'a' references undefined step 5"]


def test_malformed_reference_reported():
    errors = collect_plan_errors(_plan([_add(1, "step.one")]))

    assert len(errors) == 1
    assert "malformed reference" in errors[0]


def test_non_executable_status_rejected():
    with pytest.raises(PlanValidationError, match="expected executable"):
        validate_plan(_plan([_add(1)], status="incomplete"))


def test_all_problems_are_collected():
    plan = _plan(
        [
            _add(1),
            _add(1),
            {"type": "condition", "step_id": 3, "condition": "true", "on_true": [7], "on_false": [8]},
        ]
    )

    with pytest.raises(PlanValidationError) as exc_info:
        validate_plan(plan)

    assert len(exc_info.value.errors) == 3
