from __future__ import annotations

import pytest

from plan_orchestrator.engine.runtime.branching import BranchPlanner, split_branches
from plan_orchestrator.engine.schemas.plan import ConditionStep, FunctionCallStep, Plan
from plan_orchestrator.engine.schemas.results import (
    ConditionalResult,
    ExecutedBranch,
    FunctionCallResult,
)


def _fn(step_id: int) -> FunctionCallStep:
    return FunctionCallStep(step_id=step_id, function_name="add")


@pytest.fixture
def nested_plan() -> Plan:
    # 1 -> cond 2 (true: 3, 4 | false: 5); 4 is cond (true: 6 | false: 7); 8 is unconditional.
    return Plan(
        id="plan-nested",
        steps=[
            _fn(1),
            ConditionStep(step_id=2, condition="x", on_true=[3, 4], on_false=[5]),
            _fn(3),
            ConditionStep(step_id=4, condition="y", on_true=[6], on_false=[7]),
            _fn(5),
            _fn(6),
            _fn(7),
            _fn(8),
        ],
    )


def _cond_result(step_id: int, value: bool) -> ConditionalResult:
    return ConditionalResult(
        step_id=step_id,
        condition="c",
        evaluated_result=value,
        executed_branch=ExecutedBranch.on_true if value else ExecutedBranch.on_false,
        success=True,
    )


def test_split_branches():
    step = ConditionStep(step_id=1, condition="c", on_true=[2, 3], on_false=[4])

    assert split_branches(step, True) == (ExecutedBranch.on_true, [2, 3], [4])
    assert split_branches(step, False) == (ExecutedBranch.on_false, [4], [2, 3])


def test_parent_of(nested_plan):
    planner = BranchPlanner(nested_plan)

    assert planner.parent_of(3).step_id == 2
    assert planner.parent_of(6).step_id == 4
    assert planner.parent_of(8) is None
    assert planner.parent_of(1) is None


def test_first_condition_in_plan_order_is_parent():
    plan = Plan(
        id="p",
        steps=[
            ConditionStep(step_id=1, condition="a", on_true=[3]),
            ConditionStep(step_id=2, condition="b", on_false=[3]),
            _fn(3),
        ],
    )

    assert BranchPlanner(plan).parent_of(3).step_id == 1


def test_initial_queue_respects_start_from_step(nested_plan):
    planner = BranchPlanner(nested_plan)

    assert planner.initial_queue() == [(i, False) for i in range(1, 9)]
    assert planner.initial_queue(6) == [(6, False), (7, False), (8, False)]


def test_record_condition_returns_taken_branch(nested_plan):
    planner = BranchPlanner(nested_plan)
    step = nested_plan.get_step(2)

    assert planner.record_condition(step, _cond_result(2, True)) == [(3, True), (4, True)]
    assert planner.evaluated == {2: True}


def test_is_skipped_follows_nested_branches(nested_plan):
    planner = BranchPlanner(nested_plan)

    # Nothing evaluated yet: nothing is known to be skipped.
    assert not planner.is_skipped(6)

    planner.record_condition(nested_plan.get_step(2), _cond_result(2, False))

    assert planner.is_skipped(3)
    assert planner.is_skipped(4)
    # Condition 4 never ran, but it sits in the skipped branch of 2.
    assert planner.is_skipped(6)
    assert planner.is_skipped(7)
    assert not planner.is_skipped(5)
    assert not planner.is_skipped(8)


def test_is_skipped_with_both_conditions_evaluated(nested_plan):
    planner = BranchPlanner(nested_plan)
    planner.record_condition(nested_plan.get_step(2), _cond_result(2, True))
    planner.record_condition(nested_plan.get_step(4), _cond_result(4, True))

    assert not planner.is_skipped(6)
    assert planner.is_skipped(7)
    assert planner.is_skipped(5)


def test_is_skipped_terminates_on_cyclic_branches():
    plan = Plan(
        id="p",
        steps=[
            ConditionStep(step_id=1, condition="a", on_true=[2]),
            ConditionStep(step_id=2, condition="b", on_true=[1]),
        ],
    )

    assert BranchPlanner(plan).is_skipped(1) is False


def test_replay_marks_successful_results_only(nested_plan):
    planner = BranchPlanner(nested_plan)
    planner.replay(
        [
            FunctionCallResult(step_id=1, function_name="add", result=3, success=True),
            _cond_result(2, False),
            FunctionCallResult(step_id=5, function_name="add", success=False, error="boom"),
        ]
    )

    assert planner.executed == {1, 2}
    assert planner.evaluated == {2: False}
    assert planner.is_skipped(3)
    assert not planner.is_executed(5)


def test_mark_executed(nested_plan):
    planner = BranchPlanner(nested_plan)
    planner.mark_executed(1)

    assert planner.is_executed(1)
    assert not planner.is_executed(2)
