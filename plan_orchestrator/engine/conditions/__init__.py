"""Condition expression evaluation for condition steps."""

from .evaluator import ConditionContext, ConditionEvaluator, ExpressionConditionEvaluator

__all__ = ["ConditionContext", "ConditionEvaluator", "ExpressionConditionEvaluator"]
