from __future__ import annotations

import pytest

from plan_orchestrator.engine.errors import (
    ConditionEvaluationError,
    ExecutionTimeoutError,
    FunctionExecutionError,
    InvalidSessionStatusError,
    OrchestratorError,
    PlanNotFoundError,
    PlanValidationError,
    RequiredFieldMissingError,
    SessionNotFoundError,
    UnsupportedFieldTypeError,
)


@pytest.mark.parametrize(
    "error,code,message",
    [
        (
            FunctionExecutionError("add", "boom", parameters={"a": 1}),
            "FUNCTION_EXECUTION_ERROR",
            'Function "add" execution failed: boom',
        ),
        (
            ExecutionTimeoutError(3, "slow", 1500),
            "EXECUTION_TIMEOUT",
            "Step 3 (slow) execution timed out after 1500ms",
        ),
        (
            InvalidSessionStatusError("session-1", "resume", "completed", expected=["waiting_input"]),
            "INVALID_SESSION_STATUS",
            "Cannot resume session session-1: status is completed",
        ),
        (SessionNotFoundError("session-9"), "SESSION_NOT_FOUND", "Session not found: session-9"),
        (PlanNotFoundError("plan-x"), "PLAN_NOT_FOUND", "Plan not found: plan-x"),
        (
            PlanValidationError("Plan p is invalid", plan_id="p", errors=["e1"]),
            "PLAN_VALIDATION_ERROR",
            "Plan p is invalid",
        ),
        (
            UnsupportedFieldTypeError("bad", field_id="qty", field_type="number"),
            "UNSUPPORTED_FIELD_TYPE",
            "bad",
        ),
        (ConditionEvaluationError("nope", expression="a > "), "CONDITION_EVALUATION_ERROR", "nope"),
        (RequiredFieldMissingError("qty", "Quantity"), "REQUIRED_FIELD_MISSING", "Quantity is required"),
    ],
)
def test_codes_and_messages(error, code, message):
    assert isinstance(error, OrchestratorError)
    assert error.code == code
    assert error.message == message
    assert str(error) == message


def test_to_dict_carries_context():
    err = FunctionExecutionError("divide", "Division by zero", parameters={"a": 1, "b": 0})

    assert err.to_dict() == {
        "name": "FunctionExecutionError",
        "code": "FUNCTION_EXECUTION_ERROR",
        "message": 'Function "divide" execution failed: Division by zero',
        "context": {"function_name": "divide", "parameters": {"a": 1, "b": 0}},
    }


def test_code_override():
    err = OrchestratorError("custom", code="CUSTOM", context={"k": "v"})

    assert err.code == "CUSTOM"
    assert err.context == {"k": "v"}
    assert OrchestratorError("plain").code == "ORCHESTRATOR_ERROR"


def test_invalid_status_keeps_details():
    err = InvalidSessionStatusError("s", "cancel", "completed", expected=["pending", "running"])

    assert err.status == "completed"
    assert err.expected == ["pending", "running"]
    assert err.context["operation"] == "cancel"
