from __future__ import annotations

"""Execution session models.

A session is one stateful run of a plan. Its status moves along::

    pending -> running -> {completed, failed, waiting_input}
    waiting_input -> running
    pending/running -> failed (cancellation)

``completed`` and ``failed`` are terminal. A retry creates a new session
linked to the failed one through ``parent_session_id``.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional
from uuid import uuid4

from pydantic import Field

from .base import BaseSchema, utc_now
from .plan import Plan
from .results import ExecutionResult, PendingInput, StepResult


class SessionStatus(str, Enum):
    pending = "pending"
    running = "running"
    waiting_input = "waiting_input"
    completed = "completed"
    failed = "failed"


TERMINAL_STATUSES: FrozenSet[SessionStatus] = frozenset({SessionStatus.completed, SessionStatus.failed})


class Platform(str, Enum):
    cli = "cli"
    web = "web"


def new_session_id() -> str:
    return f"session-{uuid4().hex[:8]}"


class ExecutionSession(BaseSchema):
    id: str = Field(default_factory=new_session_id)
    plan_id: str
    base_plan_id: str
    plan_version: Optional[int] = None
    plan: Plan
    status: SessionStatus = SessionStatus.pending
    current_step_id: int = 0
    step_results: List[StepResult] = Field(default_factory=list)
    context: Dict[str, Any] = Field(default_factory=dict)
    pending_input: Optional[PendingInput] = None
    retry_count: int = 0
    parent_session_id: Optional[str] = None
    platform: Platform = Platform.cli
    result: Optional[ExecutionResult] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    completed_at: Optional[datetime] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES
