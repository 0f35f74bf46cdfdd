from __future__ import annotations

"""In-process function provider.

``LocalFunctionProvider`` maps function names to Python callables. Resolved
step parameters are passed as keyword arguments. Coroutine functions are
awaited; plain callables run in a worker thread so they cannot block the
event loop (and so the per-step timeout can still fire).
"""

import asyncio
import inspect
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .base import FunctionExecutionResult, FunctionMetadata

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Registered:
    fn: Callable[..., Any]
    metadata: FunctionMetadata


class LocalFunctionProvider:
    """
    In-memory mapping of function names to callables.

    Notes:
        - ``register`` rejects duplicate names with ``ValueError``.
        - ``execute`` never raises; failures are reported in the result.
    """

    source = "local"

    def __init__(self) -> None:
        self._functions: Dict[str, _Registered] = {}

    def register(self, name: str, fn: Callable[..., Any], *, description: str = "") -> None:
        """
        Register a callable under ``name``.

        Args:
            name: The function name plans refer to.
            fn: A plain or ``async`` callable accepting keyword arguments.
            description: Optional human-readable description.

        Raises:
            ValueError: If ``name`` is already registered.
        """
        if name in self._functions:
            raise ValueError(f"Function already registered: {name}")
        try:
            params = list(inspect.signature(fn).parameters)
        except (TypeError, ValueError):
            params = []
        meta = FunctionMetadata(name=name, description=description, source=self.source, parameters=params)
        self._functions[name] = _Registered(fn=fn, metadata=meta)

    async def has(self, name: str) -> bool:
        return name in self._functions

    async def get(self, name: str) -> Optional[FunctionMetadata]:
        reg = self._functions.get(name)
        return reg.metadata if reg is not None else None

    async def list(self) -> List[FunctionMetadata]:
        return [reg.metadata for reg in self._functions.values()]

    async def execute(self, name: str, params: Dict[str, Any]) -> FunctionExecutionResult:
        started = time.monotonic()
        reg = self._functions.get(name)
        if reg is None:
            return FunctionExecutionResult(
                success=False,
                error=f"Function not found: {name}",
                metadata={"provider": self.source, "execution_time_ms": 0},
            )
        try:
            if inspect.iscoroutinefunction(reg.fn):
                result = await reg.fn(**params)
            else:
                result = await asyncio.to_thread(reg.fn, **params)
                if inspect.isawaitable(result):
                    result = await result
        except Exception as e:
            logger.debug(f"Local function '{name}' raised: {e}")
            return FunctionExecutionResult(
                success=False,
                error=str(e) or type(e).__name__,
                metadata={"provider": self.source, "execution_time_ms": _elapsed_ms(started)},
            )
        return FunctionExecutionResult(
            success=True,
            result=result,
            metadata={"provider": self.source, "execution_time_ms": _elapsed_ms(started)},
        )


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
