"""Per-run execution context.

``ExecutionContext`` stores the value produced by each executed step (the
function result, or the ``values`` map of a user-input step) plus named
variables (initial context entries and condition ``output_variable``s).

Parameter references are resolved leniently: a missing step, a missing key,
indexing into a non-container or an out-of-range index all resolve to
``None`` instead of raising, so the called function simply receives ``None``
for that argument.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .schemas.plan import ParamRef

logger = logging.getLogger(__name__)

PathSegment = Union[str, int]

_STEP_REF_RE = re.compile(r"^step\.(\d+)(?:\.result)?((?:\.[^.\[\]]+|\[\d+\])*)$")
_SEGMENT_RE = re.compile(r"\.([^.\[\]]+)|\[(\d+)\]")


def parse_path(path: str) -> Optional[List[PathSegment]]:
    """Split ``.a.b[0].c`` into ``["a", "b", 0, "c"]``.

    Returns None when ``path`` contains anything that is not a dotted key or
    a bracketed index.
    """
    segments: List[PathSegment] = []
    pos = 0
    for match in _SEGMENT_RE.finditer(path):
        if match.start() != pos:
            return None
        key, index = match.groups()
        segments.append(int(index) if index is not None else key)
        pos = match.end()
    if pos != len(path):
        return None
    return segments


def parse_step_reference(ref: str) -> Optional[Tuple[int, List[PathSegment]]]:
    """Parse ``step.N[.result][.path]`` into ``(N, segments)``."""
    match = _STEP_REF_RE.match(ref.strip())
    if match is None:
        return None
    segments = parse_path(match.group(2) or "")
    if segments is None:
        return None
    return int(match.group(1)), segments


def traverse(value: Any, segments: Sequence[PathSegment]) -> Any:
    """Walk ``segments`` into nested mappings and sequences, None when unreachable."""
    current = value
    for seg in segments:
        if isinstance(current, Mapping):
            current = current.get(seg)
        elif isinstance(current, (list, tuple)):
            idx = seg if isinstance(seg, int) else int(seg) if seg.isdigit() else -1
            if not 0 <= idx < len(current):
                return None
            current = current[idx]
        else:
            return None
    return current


class ExecutionContext:
    """Key/value store of step outputs and named variables for one run."""

    def __init__(
        self,
        step_results: Optional[Dict[int, Any]] = None,
        variables: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._step_results: Dict[int, Any] = step_results if step_results is not None else {}
        self._variables: Dict[str, Any] = variables if variables is not None else {}

    def set_step_result(self, step_id: int, value: Any) -> None:
        self._step_results[step_id] = value

    def get_step_result(self, step_id: int) -> Any:
        return self._step_results.get(step_id)

    def has_step_result(self, step_id: int) -> bool:
        return step_id in self._step_results

    def set_variable(self, name: str, value: Any) -> None:
        self._variables[name] = value

    def get_variable(self, name: str) -> Any:
        return self._variables.get(name)

    def has_variable(self, name: str) -> bool:
        return name in self._variables

    @property
    def step_results(self) -> Dict[int, Any]:
        return dict(self._step_results)

    @property
    def variables(self) -> Dict[str, Any]:
        return dict(self._variables)

    def resolve_reference(self, ref: str) -> Any:
        parsed = parse_step_reference(ref)
        if parsed is None:
            logger.debug("Unrecognized reference path %r resolves to None", ref)
            return None
        step_id, segments = parsed
        if step_id not in self._step_results:
            return None
        return traverse(self._step_results[step_id], segments)

    def resolve_parameters(self, params: Mapping[str, ParamRef]) -> Dict[str, Any]:
        """Resolve every parameter to a concrete value."""
        resolved: Dict[str, Any] = {}
        for name, ref in params.items():
            if ref.type == "reference":
                resolved[name] = self.resolve_reference(str(ref.value))
            else:
                resolved[name] = ref.value
        return resolved
