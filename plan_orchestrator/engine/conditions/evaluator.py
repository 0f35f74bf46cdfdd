from __future__ import annotations

"""Condition evaluator.

``ExpressionConditionEvaluator`` evaluates the small boolean expressions used
by condition steps, e.g. ``step.1.result > 25`` or
``step2Result.total >= 100 && approved``.

Name resolution
---------------

- ``step.N.result`` / ``step.N.result.<path>`` / ``step.N.<path>``: the value
  recorded for step N, optionally narrowed by a key/index path.
- ``stepNResult[.<path>]``: same as ``step.N.result``.
- ``stepN<Field>`` (e.g. ``step2BasePrice``): field ``basePrice`` of step N.
- any other name: a named variable (initial context entry or a previous
  condition's ``output_variable``), optionally followed by a path.

Failure policy
--------------

``evaluate`` never raises. Unknown names, malformed expressions and type
errors are logged at WARNING level and the condition evaluates to False.
"""

import logging
import re
from typing import Any, Mapping, Protocol

from ..context import parse_path, parse_step_reference, traverse
from ..errors import ConditionEvaluationError
from .parser import evaluate_node, parse

logger = logging.getLogger(__name__)

_STEP_RESULT_RE = re.compile(r"^step(\d+)Result((?:\.[^.\[\]]+|\[\d+\])*)$")
_STEP_FIELD_RE = re.compile(r"^step(\d+)([A-Z][A-Za-z0-9_$]*)((?:\.[^.\[\]]+|\[\d+\])*)$")
_HEAD_RE = re.compile(r"^([A-Za-z_$][A-Za-z0-9_$]*)(.*)$")

DENIED_PATTERNS = (
    re.compile(r"__"),
    re.compile(r"\b(?:require|import|eval|exec|compile|open|globals|locals|getattr|Function)\s*\("),
    re.compile(r"\bimport\s"),
    re.compile(r"\blambda\b"),
    re.compile(r"\b(?:process|global|window|os|sys)\."),
    re.compile(r"\b(?:globalThis|subprocess)\b"),
)


class ConditionContext(Protocol):
    """Read-only lookup view used while evaluating a condition."""

    def has_step_result(self, step_id: int) -> bool: ...

    def get_step_result(self, step_id: int) -> Any: ...

    def has_variable(self, name: str) -> bool: ...

    def get_variable(self, name: str) -> Any: ...


class ConditionEvaluator(Protocol):
    """Protocol for condition evaluator implementations."""

    def supports(self, expression: str) -> bool: ...

    def evaluate(self, expression: str, context: ConditionContext) -> bool: ...


class ExpressionConditionEvaluator:
    """Evaluate condition expressions with a hand-written parser."""

    def supports(self, expression: str) -> bool:
        """
        Check whether an expression may be evaluated at all.

        This is a coarse denylist of code-loading and environment access
        tokens, not a sandbox: the grammar itself cannot execute code.

        Args:
            expression: The raw condition text.

        Returns:
            False for empty expressions or expressions containing a denied token.
        """
        if not expression or not expression.strip():
            return False
        return not any(pattern.search(expression) for pattern in DENIED_PATTERNS)

    def evaluate(self, expression: str, context: ConditionContext) -> bool:
        """
        Evaluate ``expression`` against ``context``.

        Args:
            expression: The condition text.
            context: Lookup view over step results and named variables.

        Returns:
            The truthiness of the expression, or False if it could not be evaluated.
        """
        try:
            node = parse(expression)
            value = evaluate_node(node, lambda name: self._resolve(name, context))
            result = bool(value)
            logger.debug("Condition %r evaluated to %s", expression, result)
            return result
        except ConditionEvaluationError as e:
            logger.warning("Condition evaluation failed, treating as false: %s (expression=%r)", e.message, expression)
            return False
        except Exception as e:
            logger.warning("Condition evaluation error, treating as false: %s (expression=%r)", e, expression)
            return False

    def _resolve(self, name: str, context: ConditionContext) -> Any:
        head = _HEAD_RE.match(name)
        if head is not None and context.has_variable(head.group(1)):
            segments = parse_path(head.group(2))
            if segments is None:
                raise ConditionEvaluationError(f"Malformed path: {name}")
            return traverse(context.get_variable(head.group(1)), segments)

        step_ref = parse_step_reference(name)
        if step_ref is not None:
            step_id, segments = step_ref
            return traverse(self._step_value(step_id, name, context), segments)

        match = _STEP_RESULT_RE.match(name)
        if match is not None:
            segments = parse_path(match.group(2)) or []
            return traverse(self._step_value(int(match.group(1)), name, context), segments)

        match = _STEP_FIELD_RE.match(name)
        if match is not None:
            value = self._step_value(int(match.group(1)), name, context)
            field = match.group(2)
            if isinstance(value, Mapping) and field not in value:
                field = field[0].lower() + field[1:]
            segments = parse_path(match.group(3)) or []
            return traverse(value, [field, *segments])

        raise ConditionEvaluationError(f"Unknown identifier: {name}")

    @staticmethod
    def _step_value(step_id: int, name: str, context: ConditionContext) -> Any:
        if not context.has_step_result(step_id):
            raise ConditionEvaluationError(f"No result recorded for step {step_id} (referenced by {name})")
        return context.get_step_result(step_id)
