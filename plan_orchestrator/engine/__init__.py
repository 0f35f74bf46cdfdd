"""Plan execution engine.

Subpackages
-----------

- ``schemas``: plan, step, result and session models.
- ``planning``: plan validation and plan id versioning.
- ``conditions``: the condition expression evaluator.
- ``functions`` / ``inputs``: function provider and input adapter contracts.
- ``runtime``: the LangGraph executor, step runners and branch bookkeeping.
- ``repos``: session and plan store contracts and in-memory stores.
- ``session``: the session state machine.
"""

from .context import ExecutionContext
from .factory import build_executor, build_session_manager
from .formatting import format_result_for_display
from .runtime import ExecuteOptions, PlanExecutor
from .session import ExecutionSessionManager

__all__ = [
    "ExecuteOptions",
    "ExecutionContext",
    "ExecutionSessionManager",
    "PlanExecutor",
    "build_executor",
    "build_session_manager",
    "format_result_for_display",
]
