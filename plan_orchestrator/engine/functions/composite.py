from __future__ import annotations

"""Composite function provider.

Combines several providers in priority order. A function is executed by the
first provider that reports having it; ``list`` returns each name once, as
seen by the highest-priority provider.
"""

from typing import Any, Dict, List, Optional, Sequence

from .base import FunctionExecutionResult, FunctionMetadata, FunctionProvider


class CompositeFunctionProvider:
    source = "composite"

    def __init__(self, providers: Sequence[FunctionProvider] = ()) -> None:
        self._providers: List[FunctionProvider] = list(providers)

    def add_provider(self, provider: FunctionProvider) -> None:
        self._providers.append(provider)

    async def _find(self, name: str) -> Optional[FunctionProvider]:
        for provider in self._providers:
            if await provider.has(name):
                return provider
        return None

    async def has(self, name: str) -> bool:
        return await self._find(name) is not None

    async def get(self, name: str) -> Optional[FunctionMetadata]:
        provider = await self._find(name)
        return await provider.get(name) if provider is not None else None

    async def list(self) -> List[FunctionMetadata]:
        seen: set[str] = set()
        out: List[FunctionMetadata] = []
        for provider in self._providers:
            for meta in await provider.list():
                if meta.name not in seen:
                    seen.add(meta.name)
                    out.append(meta)
        return out

    async def execute(self, name: str, params: Dict[str, Any]) -> FunctionExecutionResult:
        provider = await self._find(name)
        if provider is None:
            return FunctionExecutionResult(
                success=False,
                error=f"Function not found: {name}",
                metadata={"provider": self.source},
            )
        return await provider.execute(name, params)
