from __future__ import annotations

"""LangGraph plan executor.

``PlanExecutor`` runs a validated plan strictly sequentially.

Execution model
---------------

- The executor runs a LangGraph state machine over a mutable ``_GraphState``:
  ``start -> execute (loop) -> pause_for_input | finish``.
- Each ``execute`` iteration runs exactly one step, taken from a work queue
  that starts as the top-level plan order.
- Steps already executed (in this run or in ``previous_step_results``) are
  never run again; steps inside a not-taken branch are skipped and produce
  no result.
- Replayed results restore step results, the evaluated branch of each
  condition and the condition output variables.
- How a single step runs is delegated to a ``StepRunner``. With a
  ``ConditionalStepRunner``, a successful condition pushes the ids of its
  taken branch to the front of the queue, so nested branches run depth
  first, in order, right after their condition.

Failure policy
--------------

Any failed step result stops the run: it is the last entry of the trace and
the overall error is ``Step {id} failed: {error}``. Step-level exceptions are
converted into failed results and never escape ``execute``.

Timeouts
--------

Each step races against the timeout returned by the ``TimeoutStrategy``.
When the timer wins a failed result is synthesized; the underlying call is
not cancelled and may keep running in the background.

Pausing
-------

With ``ExecuteOptions.pause_on_input`` the run stops at the first user-input
step without failing and reports it in ``ExecutionResult.waiting_for_input``.
"""

import asyncio
import logging
from typing import Any, Optional

from langgraph.graph import END, StateGraph

from ..context import ExecutionContext
from ..errors import ExecutionTimeoutError
from ..inputs.base import surface_id_for
from ..planning.validation import validate_plan
from ..schemas.base import utc_now
from ..schemas.plan import ConditionStep, FunctionCallStep, Plan, Step, UserInputStep
from ..schemas.results import (
    ConditionalResult,
    ExecutionResult,
    FunctionCallResult,
    PendingInput,
    StepResult,
    UserInputResult,
)
from .branching import BranchPlanner
from .models import ExecuteOptions, _GraphState
from .runners import StepRunner, failed_result_for
from .timeouts import NoTimeoutStrategy, TimeoutStrategy

logger = logging.getLogger(__name__)


def _step_label(step: Step) -> str:
    if isinstance(step, FunctionCallStep):
        return step.function_name
    return step.type


def _drain(task: "asyncio.Future[Any]") -> None:
    # Retrieve the outcome of an abandoned step so it is not reported as unhandled.
    if not task.cancelled():
        task.exception()


class PlanExecutor:
    """Execute plans step by step with timeout enforcement.

    The executor holds no per-run state; one instance may run many plans
    concurrently.
    """

    def __init__(self, *, runner: StepRunner, timeout_strategy: Optional[TimeoutStrategy] = None) -> None:
        """
        Initialize the PlanExecutor.

        Args:
            runner: Strategy executing a single step.
            timeout_strategy: Per-step time limits; no limits when omitted.
        """
        self._runner = runner
        self._timeouts: TimeoutStrategy = timeout_strategy or NoTimeoutStrategy()
        self._graph = self._build_graph()

    @property
    def runner(self) -> StepRunner:
        return self._runner

    def _build_graph(self):
        """Build and compile the LangGraph state machine."""
        g: StateGraph = StateGraph(_GraphState)
        g.add_node("start", self._node_start)
        g.add_node("execute", self._node_execute_next)
        g.add_node("pause_for_input", self._node_pause_for_input)
        g.add_node("finish", self._node_finish)

        g.set_entry_point("start")
        g.add_edge("start", "execute")

        g.add_conditional_edges(
            "execute",
            self._route_after_execute,
            {
                "pause": "pause_for_input",
                "finish": "finish",
                "continue": "execute",
            },
        )
        g.add_edge("pause_for_input", END)
        g.add_edge("finish", END)
        return g.compile()

    async def execute(self, plan: Plan, options: Optional[ExecuteOptions] = None) -> ExecutionResult:
        """Validate and execute ``plan``.

        Raises
        ------
        PlanValidationError
            If the plan is structurally invalid. Nothing is executed.
        """
        opts = options or ExecuteOptions()
        validate_plan(plan)

        previous = list(opts.previous_step_results)
        context = ExecutionContext(variables=dict(opts.initial_context))
        for res in previous:
            if not res.success:
                continue
            if isinstance(res, FunctionCallResult):
                context.set_step_result(res.step_id, res.result)
            elif isinstance(res, UserInputResult):
                context.set_step_result(res.step_id, res.values)
            elif isinstance(res, ConditionalResult):
                step = plan.get_step(res.step_id)
                if isinstance(step, ConditionStep) and step.output_variable:
                    context.set_variable(step.output_variable, res.evaluated_result)

        planner = BranchPlanner(plan)
        planner.replay(previous)

        started_at = previous[0].executed_at if previous else utc_now()
        logger.debug(
            f"Executing plan {plan.id}: {len(plan.steps)} steps, start_from_step={opts.start_from_step}, "
            f"restored={len(previous)}"
        )

        state: _GraphState = {
            "plan": plan,
            "context": context,
            "planner": planner,
            "queue": planner.initial_queue(opts.start_from_step),
            "step_results": previous,
            "final_result": self._last_payload(previous),
            "pause_on_input": opts.pause_on_input,
        }
        # Every queue entry costs at most one iteration.
        limit = 2 * len(plan.steps) + 10
        final = await self._graph.ainvoke(state, config={"recursion_limit": limit})

        error = final.get("error")
        waiting = final.get("waiting_for_input")
        result = ExecutionResult(
            plan_id=plan.id,
            steps=list(final["step_results"]),
            final_result=final.get("final_result"),
            success=error is None,
            error=error,
            started_at=started_at,
            completed_at=utc_now(),
            waiting_for_input=waiting,
        )
        logger.debug(
            f"Plan {plan.id} finished: success={result.success}, steps={len(result.steps)}, "
            f"waiting_for_input={waiting.step_id if waiting else None}"
        )
        return result

    @staticmethod
    def _last_payload(results: list[StepResult]) -> Any:
        for res in reversed(results):
            if not res.success:
                continue
            if isinstance(res, FunctionCallResult):
                return res.result
            if isinstance(res, UserInputResult):
                return res.values
        return None

    async def _run_step(self, step: Step, context: ExecutionContext) -> StepResult:
        """Run one step with its timeout guard; never raises."""
        timeout = self._timeouts.get_timeout(step)
        task = asyncio.ensure_future(self._runner.run(step, context))
        try:
            done, _ = await asyncio.wait({task}, timeout=timeout)
        except asyncio.CancelledError:
            task.cancel()
            raise
        if task not in done:
            task.add_done_callback(_drain)
            err = ExecutionTimeoutError(step.step_id, _step_label(step), int((timeout or 0) * 1000))
            logger.error(err.message)
            return failed_result_for(step, err.message)
        try:
            return task.result()
        except Exception as e:
            logger.exception(f"Step {step.step_id} raised unexpectedly")
            return failed_result_for(step, str(e) or type(e).__name__)

    async def _node_start(self, state: _GraphState) -> _GraphState:
        """Graph entry node. Currently a no-op."""
        return state

    async def _node_execute_next(self, state: _GraphState) -> _GraphState:
        """Execute the next runnable step in the queue.

        Entries for steps that were already executed, or that sit in a
        not-taken branch, are dropped without producing a result.
        """
        plan = state["plan"]
        planner = state["planner"]
        context = state["context"]
        queue = state["queue"]

        while queue:
            step_id, from_branch = queue.pop(0)
            if planner.is_executed(step_id):
                continue
            if not from_branch and planner.is_skipped(step_id):
                logger.debug(f"Skipping step {step_id}: inside a branch that was not taken")
                continue
            step = plan.get_step(step_id)
            if step is None:
                continue

            if isinstance(step, UserInputStep) and state["pause_on_input"]:
                state["waiting_for_input"] = PendingInput(
                    step_id=step.step_id,
                    field_schema=step.field_schema,
                    surface_id=surface_id_for(step.step_id),
                )
                return state

            logger.debug(f"Executing step {step.step_id} ({step.type})")
            result = await self._run_step(step, context)
            planner.mark_executed(step.step_id)
            state["step_results"].append(result)

            if not result.success:
                state["error"] = f"Step {step.step_id} failed: {result.error}"
                state["_finished"] = True
                logger.error(f"Plan {plan.id}: {state['error']}")
                return state

            if isinstance(result, ConditionalResult) and isinstance(step, ConditionStep):
                queue[0:0] = planner.record_condition(step, result)
            elif isinstance(result, FunctionCallResult):
                context.set_step_result(step.step_id, result.result)
                state["final_result"] = result.result
            elif isinstance(result, UserInputResult):
                context.set_step_result(step.step_id, result.values)
                state["final_result"] = result.values
            return state

        state["_finished"] = True
        return state

    async def _node_pause_for_input(self, state: _GraphState) -> _GraphState:
        """Pause node.

        The graph transitions to END after this node; the caller persists the
        trace and resumes with ``previous_step_results`` once input arrives.
        """
        pending = state.get("waiting_for_input")
        if pending is not None:
            logger.info(f"Plan {state['plan'].id} waiting for input at step {pending.step_id}")
        return state

    async def _node_finish(self, state: _GraphState) -> _GraphState:
        """Finish node."""
        logger.debug(f"Plan {state['plan'].id} reached the end of its queue")
        return state

    def _route_after_execute(self, state: _GraphState) -> str:
        """Route to pause/finish/continue after executing a step."""
        if state.get("waiting_for_input"):
            return "pause"
        if state.get("_finished"):
            return "finish"
        return "continue"
