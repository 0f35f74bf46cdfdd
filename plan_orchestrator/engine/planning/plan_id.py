"""Plan id versioning helpers.

Versioned plans carry a ``-vN`` suffix: ``plan-abc-v2`` is version 2 of the
base plan ``plan-abc``. A plan id without the suffix has no version.
"""

from __future__ import annotations

import re
from typing import NamedTuple, Optional

_VERSIONED_RE = re.compile(r"^(.+)-v(\d+)$")


class PlanIdParts(NamedTuple):
    base_plan_id: str
    version: Optional[int]


def parse_plan_id(plan_id: str) -> PlanIdParts:
    match = _VERSIONED_RE.match(plan_id)
    if match is None:
        return PlanIdParts(plan_id, None)
    return PlanIdParts(match.group(1), int(match.group(2)))


def format_plan_version_id(base_plan_id: str, version: int) -> str:
    if version < 1:
        raise ValueError(f"plan version must be >= 1, got {version}")
    return f"{base_plan_id}-v{version}"
