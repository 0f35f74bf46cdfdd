from __future__ import annotations

"""Store interface contracts.

The session manager depends on these Protocols instead of concrete
persistence implementations.

Contract guidelines
-------------------

- All methods are async.
- Stores are pure persistence: no validation and no status rules.
- Stored objects must not alias caller-owned objects; implementations copy
  on the way in and on the way out.
- Plan ids are immutable: a new version of a plan is stored under a new id
  with a ``-vN`` suffix.
"""

from typing import Any, List, Optional, Protocol

from ..schemas.plan import Plan
from ..schemas.session import ExecutionSession, SessionStatus


class SessionStore(Protocol):
    """Persist and query execution sessions."""

    async def save(self, session: ExecutionSession) -> None:
        """
        Create or replace a session record.

        Args:
            session: The session state to persist.
        """
        ...

    async def load(self, session_id: str) -> Optional[ExecutionSession]:
        """
        Retrieve a session by its ID.

        Args:
            session_id: The session identifier.

        Returns:
            The session if found, else None.
        """
        ...

    async def update(self, session_id: str, **changes: Any) -> ExecutionSession:
        """
        Merge field changes into a stored session and refresh ``updated_at``.

        Args:
            session_id: The session identifier.
            **changes: Field values to overwrite.

        Returns:
            The updated session.

        Raises:
            SessionNotFoundError: If the session does not exist.
        """
        ...

    async def delete(self, session_id: str) -> bool:
        """
        Delete a session.

        Returns:
            True if a session was deleted.
        """
        ...

    async def exists(self, session_id: str) -> bool: ...

    async def list(
        self,
        *,
        status: Optional[SessionStatus] = None,
        plan_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[ExecutionSession]:
        """
        List sessions, newest first.

        Args:
            status: Only sessions in this status.
            plan_id: Only sessions whose ``plan_id`` or ``base_plan_id`` matches.
            limit: Max number of records to return.

        Returns:
            Matching sessions ordered by ``created_at`` descending.
        """
        ...


class PlanStore(Protocol):
    """Persist plans and their versions."""

    async def save_plan(self, plan: Plan) -> None: ...

    async def load_plan(self, plan_id: str) -> Optional[Plan]: ...

    async def delete_plan(self, plan_id: str) -> bool: ...

    async def list_plans(self) -> List[Plan]: ...

    async def save_plan_version(self, plan: Plan, version: int) -> str:
        """
        Store ``plan`` as version ``version`` of its base plan.

        Args:
            plan: The plan; its id may already carry a ``-vN`` suffix, which is replaced.
            version: The version number (>= 1).

        Returns:
            The versioned plan id (``<base>-v<version>``).
        """
        ...

    async def load_plan_version(self, base_plan_id: str, version: int) -> Optional[Plan]: ...

    async def load_latest_plan_version(self, base_plan_id: str) -> Optional[Plan]:
        """
        Load the highest stored version of a plan.

        Returns:
            The plan with the greatest ``-vN`` suffix, or None when no version exists.
        """
        ...

    async def list_plan_versions(self, base_plan_id: str) -> List[int]:
        """Return the stored version numbers of a plan in ascending order."""
        ...

    async def delete_plan_all_versions(self, base_plan_id: str) -> int:
        """
        Delete every version of a plan.

        Returns:
            The number of deleted versions.
        """
        ...
