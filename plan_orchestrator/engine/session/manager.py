from __future__ import annotations

"""Execution session manager.

``ExecutionSessionManager`` drives the session state machine on top of a
``PlanExecutor`` and a ``SessionStore``.

Lifecycle
---------

- ``create_session``: validate the plan, derive base id / version from the
  ``-vN`` suffix and persist a ``pending`` session.
- ``execute_session``: ``pending -> running``, run the plan in
  pause-on-input mode, then ``completed``, ``failed`` or ``waiting_input``.
- ``resume_session``: ``waiting_input -> running``; the submitted values
  become the result of the pending input step and execution continues with
  the step after it.
- ``retry_session``: from a ``failed`` session create a new ``pending``
  session linked by ``parent_session_id``, optionally keeping every result
  of the steps before ``from_step``.
- ``cancel_session``: ``pending``/``running -> failed``. Advisory only: a
  step that is already running is not interrupted.

Errors raised during execution are folded into a failed terminal result.
Structural errors (unknown session, wrong status, invalid plan) are raised
to the caller.
"""

import copy
import logging
from typing import Any, Iterable, List, Mapping, Optional

from ..errors import InvalidSessionStatusError, OrchestratorError, PlanNotFoundError, SessionNotFoundError
from ..inputs.coercion import collect_form_values
from ..planning.plan_id import parse_plan_id
from ..planning.validation import validate_plan
from ..repos.interfaces import PlanStore, SessionStore
from ..runtime.executor import PlanExecutor
from ..runtime.models import ExecuteOptions
from ..schemas.base import utc_now
from ..schemas.plan import Plan
from ..schemas.results import ExecutionResult, PendingInput, StepResult, UserInputResult
from ..schemas.session import ExecutionSession, Platform, SessionStatus

logger = logging.getLogger(__name__)

CANCELLED_ERROR = "Session cancelled by user"


class ExecutionSessionManager:
    """Orchestrate creation, execution, pause/resume, retry and cancellation of sessions."""

    def __init__(
        self,
        *,
        executor: PlanExecutor,
        store: SessionStore,
        plan_store: Optional[PlanStore] = None,
    ) -> None:
        """
        Initialize the ExecutionSessionManager.

        Args:
            executor: Executor used to run session plans.
            store: Session persistence.
            plan_store: Optional plan persistence used by ``create_session_for_plan_id``.
        """
        self._executor = executor
        self._store = store
        self._plan_store = plan_store

    async def _require(self, session_id: str) -> ExecutionSession:
        session = await self._store.load(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    @staticmethod
    def _require_status(
        session: ExecutionSession, operation: str, allowed: Iterable[SessionStatus]
    ) -> None:
        allowed = list(allowed)
        if session.status not in allowed:
            raise InvalidSessionStatusError(
                session.id, operation, session.status.value, expected=[s.value for s in allowed]
            )

    async def create_session(self, plan: Plan, platform: Platform = Platform.cli) -> ExecutionSession:
        """
        Create and persist a new pending session for ``plan``.

        Raises:
            PlanValidationError: If the plan is structurally invalid.
        """
        validate_plan(plan)
        parts = parse_plan_id(plan.id)
        session = ExecutionSession(
            plan_id=plan.id,
            base_plan_id=parts.base_plan_id,
            plan_version=parts.version,
            plan=plan.model_copy(deep=True),
            platform=platform,
        )
        await self._store.save(session)
        logger.info(f"Created session {session.id} for plan {plan.id}")
        return session

    async def create_session_for_plan_id(self, plan_id: str, platform: Platform = Platform.cli) -> ExecutionSession:
        """Create a session for a stored plan; a base id resolves to its latest version."""
        if self._plan_store is None:
            raise OrchestratorError("No plan store configured", code="PLAN_STORE_MISSING")
        plan = await self._plan_store.load_plan(plan_id)
        if plan is None:
            plan = await self._plan_store.load_latest_plan_version(plan_id)
        if plan is None:
            raise PlanNotFoundError(plan_id)
        return await self.create_session(plan, platform)

    async def execute_session(self, session_id: str) -> ExecutionSession:
        """
        Run a pending session.

        A retried session starts at its ``current_step_id`` with the carried
        over results.

        Returns:
            The session in its new state (completed, failed or waiting_input).

        Raises:
            SessionNotFoundError: If the session does not exist.
            InvalidSessionStatusError: If the session is not pending.
        """
        session = await self._require(session_id)
        self._require_status(session, "execute", [SessionStatus.pending])

        session = await self._store.update(session_id, status=SessionStatus.running)
        logger.info(f"Executing session {session_id} (plan={session.plan_id}, from_step={session.current_step_id})")
        result = await self._run(session, start_from_step=session.current_step_id)
        return await self._finalize(session_id, result)

    async def resume_session(self, session_id: str, user_input: Mapping[str, Any]) -> ExecutionSession:
        """
        Continue a session parked on a user input step.

        Empty fields take their defaults. A skippable form submitted with no
        values is recorded as skipped.

        Args:
            session_id: The waiting session.
            user_input: Values for the pending step keyed by field id.

        Raises:
            SessionNotFoundError: If the session does not exist.
            InvalidSessionStatusError: If the session is not waiting for input.
            UnsupportedFieldTypeError: If a value cannot be coerced to its field type.
            RequiredFieldMissingError: If a required field is empty and has no default.
        """
        session = await self._require(session_id)
        self._require_status(session, "resume", [SessionStatus.waiting_input])
        pending = session.pending_input
        if pending is None:
            raise InvalidSessionStatusError(session_id, "resume", "waiting_input without pending input")

        values, skipped = self._collect_input(pending, user_input)
        step_results: List[StepResult] = [
            *session.step_results,
            UserInputResult(step_id=pending.step_id, values=values, skipped=skipped, success=True),
        ]
        context = {**session.context, **values}
        next_step = pending.step_id + 1
        session = await self._store.update(
            session_id,
            status=SessionStatus.running,
            step_results=step_results,
            context=context,
            current_step_id=next_step,
            pending_input=None,
        )
        logger.info(f"Resuming session {session_id} after input for step {pending.step_id}")
        result = await self._run(session, start_from_step=next_step)
        return await self._finalize(session_id, result)

    async def retry_session(self, session_id: str, from_step: Optional[int] = None) -> ExecutionSession:
        """
        Create a new pending session that retries a failed one.

        Args:
            session_id: The failed session.
            from_step: Keep results and context of steps before this id and
                start there. When omitted the retry starts from scratch.

        Raises:
            SessionNotFoundError: If the session does not exist.
            InvalidSessionStatusError: If the session has not failed.
        """
        source = await self._require(session_id)
        self._require_status(source, "retry", [SessionStatus.failed])

        retry = ExecutionSession(
            plan_id=source.plan_id,
            base_plan_id=source.base_plan_id,
            plan_version=source.plan_version,
            plan=source.plan.model_copy(deep=True),
            retry_count=source.retry_count + 1,
            parent_session_id=source.id,
            platform=source.platform,
        )
        if from_step is not None:
            retry.context = copy.deepcopy(source.context)
            retry.step_results = [r.model_copy(deep=True) for r in source.step_results if r.step_id < from_step]
            retry.current_step_id = from_step
        await self._store.save(retry)
        logger.info(
            f"Created retry session {retry.id} for {source.id} (retry_count={retry.retry_count}, from_step={from_step})"
        )
        return retry

    async def cancel_session(self, session_id: str) -> ExecutionSession:
        """
        Mark a pending or running session as failed.

        Already recorded step results are kept. A step in flight is not interrupted.

        Raises:
            SessionNotFoundError: If the session does not exist.
            InvalidSessionStatusError: If the session is not pending or running.
        """
        session = await self._require(session_id)
        self._require_status(session, "cancel", [SessionStatus.pending, SessionStatus.running])
        now = utc_now()
        result = ExecutionResult(
            plan_id=session.plan_id,
            steps=list(session.step_results),
            success=False,
            error=CANCELLED_ERROR,
            started_at=session.created_at,
            completed_at=now,
        )
        logger.info(f"Cancelled session {session_id}")
        return await self._store.update(
            session_id,
            status=SessionStatus.failed,
            result=result,
            completed_at=now,
            pending_input=None,
        )

    async def get_session_status(self, session_id: str) -> Optional[SessionStatus]:
        """Return the session status, or None when the session does not exist."""
        session = await self._store.load(session_id)
        return session.status if session is not None else None

    async def get_session(self, session_id: str) -> Optional[ExecutionSession]:
        return await self._store.load(session_id)

    async def list_sessions(
        self,
        *,
        status: Optional[SessionStatus] = None,
        plan_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[ExecutionSession]:
        return await self._store.list(status=status, plan_id=plan_id, limit=limit)

    @staticmethod
    def _collect_input(pending: PendingInput, user_input: Mapping[str, Any]) -> tuple[dict[str, Any], bool]:
        values, skipped = collect_form_values(pending.field_schema, user_input)
        # Keys outside the form are kept as submitted.
        known = {f.id for f in pending.field_schema.fields}
        extra = {k: v for k, v in user_input.items() if k not in known}
        return {**values, **extra}, skipped

    async def _run(self, session: ExecutionSession, *, start_from_step: int) -> ExecutionResult:
        options = ExecuteOptions(
            start_from_step=start_from_step,
            initial_context=dict(session.context),
            previous_step_results=list(session.step_results),
            pause_on_input=True,
        )
        try:
            return await self._executor.execute(session.plan, options)
        except Exception as e:
            logger.exception(f"Session {session.id} execution raised")
            return ExecutionResult(
                plan_id=session.plan_id,
                steps=list(session.step_results),
                success=False,
                error=str(e) or type(e).__name__,
                started_at=session.created_at,
            )

    async def _finalize(self, session_id: str, result: ExecutionResult) -> ExecutionSession:
        current = await self._require(session_id)
        if current.is_terminal:
            # Cancelled while running: keep the cancellation, record what ran.
            logger.warning(f"Session {session_id} became {current.status.value} during execution")
            return await self._store.update(session_id, step_results=result.steps)

        if result.waiting_for_input is not None:
            pending = result.waiting_for_input
            logger.info(f"Session {session_id} waiting for input at step {pending.step_id}")
            return await self._store.update(
                session_id,
                status=SessionStatus.waiting_input,
                step_results=result.steps,
                current_step_id=pending.step_id,
                pending_input=pending,
                result=result,
            )

        status = SessionStatus.completed if result.success else SessionStatus.failed
        last_step = result.steps[-1].step_id if result.steps else current.current_step_id
        logger.info(f"Session {session_id} {status.value}" + (f": {result.error}" if result.error else ""))
        return await self._store.update(
            session_id,
            status=status,
            step_results=result.steps,
            current_step_id=last_step,
            pending_input=None,
            result=result,
            completed_at=result.completed_at,
        )
