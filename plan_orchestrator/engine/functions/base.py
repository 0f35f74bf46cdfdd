from __future__ import annotations

"""Function provider protocol and execution data models.

A function provider is the concrete execution unit for function call steps.
Whether the function runs in-process or remotely is invisible to the engine:
it resolves parameters, calls ``FunctionProvider.execute`` and inspects the
returned ``FunctionExecutionResult``.

Providers should:

- report failures through ``success=False`` and ``error`` rather than raising
  (the engine also tolerates raised exceptions),
- return the function's payload in ``result``.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol


@dataclass(frozen=True)
class FunctionMetadata:
    """Descriptive information about an available function."""

    name: str
    description: str = ""
    source: str = "local"
    parameters: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class FunctionExecutionResult:
    """Structured function execution result."""

    success: bool
    result: Any = None
    error: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


class FunctionProvider(Protocol):
    """Protocol for function provider implementations."""

    source: str

    async def execute(self, name: str, params: Dict[str, Any]) -> FunctionExecutionResult: ...

    async def has(self, name: str) -> bool: ...

    async def get(self, name: str) -> Optional[FunctionMetadata]: ...

    async def list(self) -> List[FunctionMetadata]: ...
