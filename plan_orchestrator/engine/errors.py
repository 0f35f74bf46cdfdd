"""Error taxonomy for the execution engine.

Every error carries a stable ``code`` and a ``context`` mapping with the
diagnostic details (function name, resolved parameters, step id, ...).

Propagation rules:

- Step-level errors (``FunctionExecutionError``, ``ExecutionTimeoutError``,
  ``UnsupportedFieldTypeError``, ``RequiredFieldMissingError``) are converted
  into failed step results by the executor and never escape it.
- Input submitted to ``resume_session`` is checked up front: the two input
  errors are raised to the caller and the session is left untouched.
- ``ConditionEvaluationError`` is caught inside the condition evaluator and
  downgraded to ``False``.
- Structural errors (``PlanValidationError``, ``SessionNotFoundError``,
  ``InvalidSessionStatusError``) are raised to the caller.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Optional


class OrchestratorError(Exception):
    """Base class for all engine errors."""

    code: str = "ORCHESTRATOR_ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.context: Dict[str, Any] = dict(context or {})

    def to_dict(self) -> Dict[str, Any]:
        return {"name": type(self).__name__, "code": self.code, "message": self.message, "context": self.context}


class PlanValidationError(OrchestratorError):
    code = "PLAN_VALIDATION_ERROR"

    def __init__(self, message: str, *, plan_id: Optional[str] = None, errors: Iterable[str] = ()) -> None:
        errs = list(errors)
        super().__init__(message, context={"plan_id": plan_id, "errors": errs})
        self.plan_id = plan_id
        self.errors = errs


class FunctionExecutionError(OrchestratorError):
    """A function provider reported a failure or raised."""

    code = "FUNCTION_EXECUTION_ERROR"

    def __init__(self, function_name: str, reason: str, *, parameters: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(
            f'Function "{function_name}" execution failed: {reason}',
            context={"function_name": function_name, "parameters": dict(parameters or {})},
        )
        self.function_name = function_name
        self.reason = reason
        self.parameters = dict(parameters or {})


class ExecutionTimeoutError(OrchestratorError):
    code = "EXECUTION_TIMEOUT"

    def __init__(self, step_id: int, label: str, timeout_ms: int) -> None:
        super().__init__(
            f"Step {step_id} ({label}) execution timed out after {timeout_ms}ms",
            context={"step_id": step_id, "label": label, "timeout_ms": timeout_ms},
        )
        self.step_id = step_id
        self.timeout_ms = timeout_ms


class UnsupportedFieldTypeError(OrchestratorError):
    """A user-input value could not be coerced to its declared field type."""

    code = "UNSUPPORTED_FIELD_TYPE"

    def __init__(self, message: str, *, field_id: Optional[str] = None, field_type: Optional[str] = None) -> None:
        super().__init__(message, context={"field_id": field_id, "field_type": field_type})
        self.field_id = field_id
        self.field_type = field_type


class InvalidSessionStatusError(OrchestratorError):
    code = "INVALID_SESSION_STATUS"

    def __init__(self, session_id: str, operation: str, status: str, expected: Iterable[str] = ()) -> None:
        exp = list(expected)
        super().__init__(
            f"Cannot {operation} session {session_id}: status is {status}",
            context={"session_id": session_id, "operation": operation, "status": status, "expected": exp},
        )
        self.session_id = session_id
        self.status = status
        self.expected = exp


class SessionNotFoundError(OrchestratorError):
    code = "SESSION_NOT_FOUND"

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session not found: {session_id}", context={"session_id": session_id})
        self.session_id = session_id


class ConditionEvaluationError(OrchestratorError):
    """Raised while resolving or evaluating a condition expression.

    Never leaves ``ExpressionConditionEvaluator.evaluate``.
    """

    code = "CONDITION_EVALUATION_ERROR"

    def __init__(self, message: str, *, expression: Optional[str] = None) -> None:
        super().__init__(message, context={"expression": expression})
        self.expression = expression


class PlanNotFoundError(OrchestratorError):
    code = "PLAN_NOT_FOUND"

    def __init__(self, plan_id: str) -> None:
        super().__init__(f"Plan not found: {plan_id}", context={"plan_id": plan_id})
        self.plan_id = plan_id


class RequiredFieldMissingError(OrchestratorError):
    """A required user-input field was left empty and has no default."""

    code = "REQUIRED_FIELD_MISSING"

    def __init__(self, field_id: str, label: str) -> None:
        super().__init__(f"{label} is required", context={"field_id": field_id})
        self.field_id = field_id
