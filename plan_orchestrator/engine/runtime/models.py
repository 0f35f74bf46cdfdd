from __future__ import annotations

"""Execution options and LangGraph state types.

- ``ExecuteOptions`` controls where a run starts and what it inherits from a
  previous (paused or failed) run.
- ``_GraphState`` is the mutable state passed between LangGraph nodes. It is
  never checkpointed, so it may hold live objects (context, planner).
"""

from typing import Any, Dict, List, NotRequired, Optional, Required, TypedDict

from pydantic import Field

from ..context import ExecutionContext
from ..schemas.base import BaseSchema
from ..schemas.plan import Plan
from ..schemas.results import PendingInput, StepResult
from .branching import BranchPlanner, QueueEntry


class ExecuteOptions(BaseSchema):
    """Options for a single ``PlanExecutor.execute`` call.

    Attributes
    ----------
    start_from_step:
        Top-level steps whose id is lower than this are not visited.
    initial_context:
        Named variables available to condition expressions.
    previous_step_results:
        Results of an earlier run of the same plan. They are copied into the
        new result, successful ones are replayed into the context, and their
        steps are never executed again.
    pause_on_input:
        Stop at the first user-input step and report it through
        ``ExecutionResult.waiting_for_input`` instead of calling the input
        adapter.
    """

    start_from_step: int = 0
    initial_context: Dict[str, Any] = Field(default_factory=dict)
    previous_step_results: List[StepResult] = Field(default_factory=list)
    pause_on_input: bool = False


class _GraphState(TypedDict):
    """Mutable LangGraph state for a single plan execution.

    Required keys:

    - ``plan``: the validated plan.
    - ``context``: step outputs and named variables.
    - ``planner``: branch bookkeeping.
    - ``queue``: step ids still to visit; taken branches are pushed to the front.
    - ``step_results``: the trace so far, previous results included.
    - ``final_result``: payload of the last successful function/input step.
    - ``pause_on_input``: see ``ExecuteOptions``.

    Optional keys:

    - ``waiting_for_input``: set when the run parks on a user-input step.
    - ``error``: overall failure message.
    - ``_finished``: used to terminate the graph.
    """

    plan: Required[Plan]
    context: Required[ExecutionContext]
    planner: Required[BranchPlanner]
    queue: Required[List[QueueEntry]]
    step_results: Required[List[StepResult]]
    final_result: Required[Any]
    pause_on_input: Required[bool]
    waiting_for_input: NotRequired[Optional[PendingInput]]
    error: NotRequired[Optional[str]]
    _finished: NotRequired[bool]
