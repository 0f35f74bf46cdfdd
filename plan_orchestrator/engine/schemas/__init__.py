"""Schemas and DTOs for the execution engine."""

from .base import BaseSchema
from .plan import (
    ConditionStep,
    FieldType,
    FormField,
    FormInputSchema,
    FunctionCallStep,
    ParamRef,
    Plan,
    PlanStatus,
    SelectOption,
    Step,
    StepType,
    UserInputStep,
)
from .results import (
    ConditionalResult,
    ExecutedBranch,
    ExecutionResult,
    FunctionCallResult,
    PendingInput,
    StepResult,
    UserInputResult,
)
from .session import ExecutionSession, Platform, SessionStatus

__all__ = [
    "BaseSchema",
    "ConditionStep",
    "ConditionalResult",
    "ExecutedBranch",
    "ExecutionResult",
    "ExecutionSession",
    "FieldType",
    "FormField",
    "FormInputSchema",
    "FunctionCallResult",
    "FunctionCallStep",
    "ParamRef",
    "PendingInput",
    "Plan",
    "PlanStatus",
    "Platform",
    "SelectOption",
    "SessionStatus",
    "Step",
    "StepResult",
    "StepType",
    "UserInputResult",
    "UserInputStep",
]
