"""LangGraph-based execution runtime for plans.

 The runtime takes a validated ``Plan`` and executes it with strong
 guarantees:

 - steps run strictly one after another, in plan order, with taken branches
   expanded right after their condition;
 - a failed or timed-out step ends the run with a complete trace;
 - steps in a branch that was not taken never run and never produce results.

 The main entry point is ``PlanExecutor``; how an individual step runs is
 provided by a ``StepRunner`` (``BaseStepRunner`` or
 ``ConditionalStepRunner``).
 """

from .branching import BranchPlanner
from .executor import PlanExecutor
from .models import ExecuteOptions
from .runners import BaseStepRunner, ConditionalStepRunner, StepRunner
from .timeouts import ConfigurableTimeoutStrategy, NoTimeoutStrategy, TimeoutStrategy

__all__ = [
    "BaseStepRunner",
    "BranchPlanner",
    "ConditionalStepRunner",
    "ConfigurableTimeoutStrategy",
    "ExecuteOptions",
    "NoTimeoutStrategy",
    "PlanExecutor",
    "StepRunner",
    "TimeoutStrategy",
]
