from __future__ import annotations

"""Plan and step models.

A plan is an ordered list of steps produced by an external planner. Steps are
a closed tagged union discriminated by ``type``:

- ``FunctionCallStep``: invoke a named function with literal or referenced
  parameters.
- ``UserInputStep``: collect values for a form schema.
- ``ConditionStep``: evaluate a boolean expression and run one of two
  branches (lists of step ids defined elsewhere in the same plan).
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import Field

from .base import BaseSchema, utc_now


class PlanStatus(str, Enum):
    executable = "executable"
    incomplete = "incomplete"
    invalid = "invalid"


class StepType(str, Enum):
    function_call = "function_call"
    user_input = "user_input"
    condition = "condition"


class FieldType(str, Enum):
    text = "text"
    number = "number"
    boolean = "boolean"
    date = "date"
    single_select = "single_select"
    multi_select = "multi_select"


class ParamRef(BaseSchema):
    """A function parameter: either a literal value or a reference path.

    Reference paths look like ``step.2.result`` or ``step.2.result.items[0].price``.
    """

    type: Literal["literal", "reference"]
    value: Any = None

    @classmethod
    def literal(cls, value: Any) -> "ParamRef":
        return cls(type="literal", value=value)

    @classmethod
    def reference(cls, path: str) -> "ParamRef":
        return cls(type="reference", value=path)


class SelectOption(BaseSchema):
    value: Union[str, int, float]
    label: str
    description: Optional[str] = None


class FormField(BaseSchema):
    id: str = Field(min_length=1)
    type: FieldType
    label: str
    description: Optional[str] = None
    required: bool = False
    default_value: Any = None
    options: List[SelectOption] = Field(default_factory=list)


class FormInputSchema(BaseSchema):
    version: Literal["1.0"] = "1.0"
    fields: List[FormField] = Field(min_length=1)
    skippable: bool = False


class FunctionCallStep(BaseSchema):
    type: Literal["function_call"] = "function_call"
    step_id: int
    function_name: str
    parameters: Dict[str, ParamRef] = Field(default_factory=dict)
    description: Optional[str] = None


class UserInputStep(BaseSchema):
    type: Literal["user_input"] = "user_input"
    step_id: int
    field_schema: FormInputSchema
    description: Optional[str] = None


class ConditionStep(BaseSchema):
    type: Literal["condition"] = "condition"
    step_id: int
    condition: str
    on_true: List[int] = Field(default_factory=list)
    on_false: List[int] = Field(default_factory=list)
    output_variable: Optional[str] = None
    description: Optional[str] = None


Step = Annotated[Union[FunctionCallStep, UserInputStep, ConditionStep], Field(discriminator="type")]


class Plan(BaseSchema):
    id: str
    user_request: str = ""
    steps: List[Step] = Field(default_factory=list)
    status: PlanStatus = PlanStatus.executable
    created_at: datetime = Field(default_factory=utc_now)

    def get_step(self, step_id: int) -> Optional[Step]:
        for step in self.steps:
            if step.step_id == step_id:
                return step
        return None

    def step_ids(self) -> List[int]:
        return [s.step_id for s in self.steps]
