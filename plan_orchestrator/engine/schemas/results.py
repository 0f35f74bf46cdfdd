from __future__ import annotations

"""Step and execution result models.

There is exactly one ``StepResult`` per executed step. Steps skipped by a
condition never produce a result; they only appear in the governing
``ConditionalResult.skipped_steps``.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import Field

from .base import BaseSchema, utc_now
from .plan import FormInputSchema


class ExecutedBranch(str, Enum):
    on_true = "on_true"
    on_false = "on_false"
    none = "none"


class FunctionCallResult(BaseSchema):
    type: Literal["function_call"] = "function_call"
    step_id: int
    function_name: str
    parameters: Dict[str, Any] = Field(default_factory=dict)
    result: Any = None
    success: bool
    error: Optional[str] = None
    executed_at: datetime = Field(default_factory=utc_now)


class UserInputResult(BaseSchema):
    type: Literal["user_input"] = "user_input"
    step_id: int
    values: Dict[str, Any] = Field(default_factory=dict)
    skipped: bool = False
    success: bool
    error: Optional[str] = None
    executed_at: datetime = Field(default_factory=utc_now)


class ConditionalResult(BaseSchema):
    type: Literal["condition"] = "condition"
    step_id: int
    condition: str
    evaluated_result: bool = False
    executed_branch: ExecutedBranch = ExecutedBranch.none
    skipped_steps: List[int] = Field(default_factory=list)
    success: bool
    error: Optional[str] = None
    executed_at: datetime = Field(default_factory=utc_now)


StepResult = Annotated[
    Union[FunctionCallResult, UserInputResult, ConditionalResult],
    Field(discriminator="type"),
]


class PendingInput(BaseSchema):
    """A user-input step the run is parked on."""

    step_id: int
    field_schema: FormInputSchema
    surface_id: str


class ExecutionResult(BaseSchema):
    plan_id: str
    steps: List[StepResult] = Field(default_factory=list)
    final_result: Any = None
    success: bool
    error: Optional[str] = None
    started_at: datetime = Field(default_factory=utc_now)
    completed_at: datetime = Field(default_factory=utc_now)
    waiting_for_input: Optional[PendingInput] = None

    def result_for(self, step_id: int) -> Optional[StepResult]:
        for res in self.steps:
            if res.step_id == step_id:
                return res
        return None

    @property
    def executed_step_ids(self) -> List[int]:
        return [r.step_id for r in self.steps]
