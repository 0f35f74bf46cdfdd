from __future__ import annotations

"""Branch bookkeeping for conditional plans.

``BranchPlanner`` decides which step ids run next. It keeps:

- the parent condition of each branch step (the first condition in plan
  order whose ``on_true``/``on_false`` lists the id),
- the evaluated boolean of every condition seen so far,
- the set of step ids already executed.

The executor consumes a queue of step ids: the top-level plan order, with
the taken branch of each evaluated condition pushed to the front. Whether a
top-level step must be skipped is decided structurally by walking up its
parent conditions.
"""

import logging
from typing import Dict, Iterable, List, Optional, Set, Tuple

from ..schemas.plan import ConditionStep, Plan
from ..schemas.results import ConditionalResult, ExecutedBranch, StepResult

logger = logging.getLogger(__name__)

# (step id, queued by a taken branch)
QueueEntry = Tuple[int, bool]


def split_branches(step: ConditionStep, value: bool) -> tuple[ExecutedBranch, List[int], List[int]]:
    """Return ``(executed_branch, taken_ids, skipped_ids)`` for an evaluated condition."""
    if value:
        return ExecutedBranch.on_true, list(step.on_true), list(step.on_false)
    return ExecutedBranch.on_false, list(step.on_false), list(step.on_true)


class BranchPlanner:
    def __init__(self, plan: Plan) -> None:
        self._plan = plan
        self._parents: Dict[int, ConditionStep] = {}
        for step in plan.steps:
            if isinstance(step, ConditionStep):
                for child in (*step.on_true, *step.on_false):
                    self._parents.setdefault(child, step)
        self._evaluated: Dict[int, bool] = {}
        self._executed: Set[int] = set()

    @property
    def evaluated(self) -> Dict[int, bool]:
        return dict(self._evaluated)

    @property
    def executed(self) -> Set[int]:
        return set(self._executed)

    def parent_of(self, step_id: int) -> Optional[ConditionStep]:
        return self._parents.get(step_id)

    def initial_queue(self, start_from_step: int = 0) -> List[QueueEntry]:
        return [(s.step_id, False) for s in self._plan.steps if s.step_id >= start_from_step]

    def is_executed(self, step_id: int) -> bool:
        return step_id in self._executed

    def mark_executed(self, step_id: int) -> None:
        self._executed.add(step_id)

    def record_condition(self, step: ConditionStep, result: ConditionalResult) -> List[QueueEntry]:
        """Record an evaluated condition and return the branch entries to run now."""
        self._evaluated[step.step_id] = result.evaluated_result
        _, taken, _ = split_branches(step, result.evaluated_result)
        return [(step_id, True) for step_id in taken]

    def is_skipped(self, step_id: int) -> bool:
        """Whether ``step_id`` lies inside a not-taken branch of some ancestor condition."""
        seen: Set[int] = set()
        current = step_id
        while current not in seen:
            seen.add(current)
            parent = self._parents.get(current)
            if parent is None:
                return False
            if parent.step_id in self._evaluated:
                value = self._evaluated[parent.step_id]
                in_true = current in parent.on_true
                return not value if in_true else value
            # Parent not evaluated yet: it may itself sit in a skipped branch.
            current = parent.step_id
        return False

    def replay(self, results: Iterable[StepResult]) -> None:
        """Restore bookkeeping from results of an earlier run of the same plan."""
        for res in results:
            if not res.success:
                continue
            self._executed.add(res.step_id)
            if isinstance(res, ConditionalResult):
                self._evaluated[res.step_id] = res.evaluated_result
        logger.debug(f"Replayed {len(self._executed)} executed steps, {len(self._evaluated)} conditions")
