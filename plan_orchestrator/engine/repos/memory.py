from __future__ import annotations

"""In-memory implementations of the store protocols.

Suitable for tests, CLI runs and as a reference for persistent adapters.
All values are deep-copied on save and load.
"""

import copy
import logging
from typing import Any, Dict, List, Optional

from ..errors import SessionNotFoundError
from ..planning.plan_id import format_plan_version_id, parse_plan_id
from ..schemas.base import utc_now
from ..schemas.plan import Plan
from ..schemas.session import ExecutionSession, SessionStatus

logger = logging.getLogger(__name__)


class InMemorySessionStore:
    def __init__(self) -> None:
        self._sessions: Dict[str, ExecutionSession] = {}
        self._seq: Dict[str, int] = {}
        self._counter = 0

    async def save(self, session: ExecutionSession) -> None:
        if session.id not in self._seq:
            self._counter += 1
            self._seq[session.id] = self._counter
        self._sessions[session.id] = session.model_copy(deep=True)
        logger.debug(f"Saved session {session.id} (status={session.status.value})")

    async def load(self, session_id: str) -> Optional[ExecutionSession]:
        session = self._sessions.get(session_id)
        return session.model_copy(deep=True) if session is not None else None

    async def update(self, session_id: str, **changes: Any) -> ExecutionSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        changes = copy.deepcopy(changes)
        changes["updated_at"] = utc_now()
        updated = session.model_copy(update=changes, deep=True)
        self._sessions[session_id] = updated
        return updated.model_copy(deep=True)

    async def delete(self, session_id: str) -> bool:
        self._seq.pop(session_id, None)
        return self._sessions.pop(session_id, None) is not None

    async def exists(self, session_id: str) -> bool:
        return session_id in self._sessions

    async def list(
        self,
        *,
        status: Optional[SessionStatus] = None,
        plan_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[ExecutionSession]:
        items = [
            s
            for s in self._sessions.values()
            if (status is None or s.status == status)
            and (plan_id is None or plan_id in (s.plan_id, s.base_plan_id))
        ]
        items.sort(key=lambda s: (s.created_at, self._seq.get(s.id, 0)), reverse=True)
        if limit is not None:
            items = items[:limit]
        return [s.model_copy(deep=True) for s in items]


class InMemoryPlanStore:
    def __init__(self) -> None:
        self._plans: Dict[str, Plan] = {}

    async def save_plan(self, plan: Plan) -> None:
        self._plans[plan.id] = plan.model_copy(deep=True)

    async def load_plan(self, plan_id: str) -> Optional[Plan]:
        plan = self._plans.get(plan_id)
        return plan.model_copy(deep=True) if plan is not None else None

    async def delete_plan(self, plan_id: str) -> bool:
        return self._plans.pop(plan_id, None) is not None

    async def list_plans(self) -> List[Plan]:
        return [p.model_copy(deep=True) for p in self._plans.values()]

    async def save_plan_version(self, plan: Plan, version: int) -> str:
        base_plan_id = parse_plan_id(plan.id).base_plan_id
        versioned_id = format_plan_version_id(base_plan_id, version)
        self._plans[versioned_id] = plan.model_copy(update={"id": versioned_id}, deep=True)
        return versioned_id

    async def load_plan_version(self, base_plan_id: str, version: int) -> Optional[Plan]:
        return await self.load_plan(format_plan_version_id(base_plan_id, version))

    async def load_latest_plan_version(self, base_plan_id: str) -> Optional[Plan]:
        versions = await self.list_plan_versions(base_plan_id)
        if not versions:
            return None
        return await self.load_plan_version(base_plan_id, versions[-1])

    async def list_plan_versions(self, base_plan_id: str) -> List[int]:
        versions: List[int] = []
        for plan_id in self._plans:
            parts = parse_plan_id(plan_id)
            if parts.base_plan_id == base_plan_id and parts.version is not None:
                versions.append(parts.version)
        return sorted(versions)

    async def delete_plan_all_versions(self, base_plan_id: str) -> int:
        versions = await self.list_plan_versions(base_plan_id)
        for version in versions:
            self._plans.pop(format_plan_version_id(base_plan_id, version), None)
        return len(versions)
