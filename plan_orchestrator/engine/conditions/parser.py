"""Tokenizer, parser and interpreter for condition expressions.

Grammar (lowest precedence first)::

    expr       := and_expr (("||" | "or") and_expr)*
    and_expr   := not_expr (("&&" | "and") not_expr)*
    not_expr   := ("!" | "not") not_expr | comparison
    comparison := operand (COMP_OP operand)?
    operand    := NUMBER | STRING | true | false | null | NAME
                | "-" operand | "(" expr ")"

``COMP_OP`` is one of ``== != === !== > < >= <= contains``. ``NAME`` is an
identifier optionally followed by ``.key`` and ``[index]`` accessors
(``step.1.result.items[0].price``). Names are resolved through a callback
supplied by the caller; nothing is ever executed as code.
"""

from __future__ import annotations

import operator
import re
from dataclasses import dataclass
from typing import Any, Callable, List, NamedTuple, Optional, Union

from ..errors import ConditionEvaluationError

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
  | (?P<number>\d+(?:\.\d+)?)
  | (?P<string>'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")
  | (?P<op>===|!==|==|!=|>=|<=|&&|\|\||[><!()\-])
  | (?P<name>[A-Za-z_$][A-Za-z0-9_$]*(?:\.[A-Za-z0-9_$]+|\[\d+\])*)
    """,
    re.VERBOSE,
)

_KEYWORDS = {
    "true": True,
    "True": True,
    "false": False,
    "False": False,
    "null": None,
    "None": None,
    "undefined": None,
}

# Longer operators are matched first by the tokenizer.
COMPARISON_OPERATORS = {
    "==": operator.eq,
    "===": operator.eq,
    "!=": operator.ne,
    "!==": operator.ne,
    ">=": operator.ge,
    "<=": operator.le,
    ">": operator.gt,
    "<": operator.lt,
}


class Token(NamedTuple):
    kind: str
    value: str
    pos: int


@dataclass(frozen=True)
class Literal:
    value: Any


@dataclass(frozen=True)
class Name:
    path: str


@dataclass(frozen=True)
class Not:
    operand: "Node"


@dataclass(frozen=True)
class Negate:
    operand: "Node"


@dataclass(frozen=True)
class BoolOp:
    op: str
    left: "Node"
    right: "Node"


@dataclass(frozen=True)
class Compare:
    op: str
    left: "Node"
    right: "Node"


Node = Union[Literal, Name, Not, Negate, BoolOp, Compare]


def tokenize(expression: str) -> List[Token]:
    tokens: List[Token] = []
    pos = 0
    while pos < len(expression):
        match = _TOKEN_RE.match(expression, pos)
        if match is None:
            raise ConditionEvaluationError(
                f"Unexpected character {expression[pos]!r} at position {pos}", expression=expression
            )
        kind = match.lastgroup or ""
        if kind != "ws":
            value = match.group()
            if kind == "name" and value in ("and", "or", "not", "contains"):
                kind = "op"
            tokens.append(Token(kind, value, pos))
        pos = match.end()
    return tokens


def _unquote(raw: str) -> str:
    return re.sub(r"\\(.)", r"\1", raw[1:-1])


class _Parser:
    def __init__(self, expression: str) -> None:
        self._expression = expression
        self._tokens = tokenize(expression)
        self._pos = 0

    def _peek(self) -> Optional[Token]:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def _accept(self, *values: str) -> Optional[Token]:
        tok = self._peek()
        if tok is not None and tok.kind == "op" and tok.value in values:
            self._pos += 1
            return tok
        return None

    def _error(self, message: str) -> ConditionEvaluationError:
        return ConditionEvaluationError(message, expression=self._expression)

    def parse(self) -> Node:
        if not self._tokens:
            raise self._error("Empty condition expression")
        node = self._or()
        tok = self._peek()
        if tok is not None:
            raise self._error(f"Unexpected token {tok.value!r} at position {tok.pos}")
        return node

    def _or(self) -> Node:
        node = self._and()
        while self._accept("||", "or"):
            node = BoolOp("or", node, self._and())
        return node

    def _and(self) -> Node:
        node = self._not()
        while self._accept("&&", "and"):
            node = BoolOp("and", node, self._not())
        return node

    def _not(self) -> Node:
        if self._accept("!", "not"):
            return Not(self._not())
        return self._comparison()

    def _comparison(self) -> Node:
        left = self._operand()
        tok = self._accept(*COMPARISON_OPERATORS, "contains")
        if tok is None:
            return left
        return Compare(tok.value, left, self._operand())

    def _operand(self) -> Node:
        tok = self._peek()
        if tok is None:
            raise self._error("Unexpected end of expression")
        if self._accept("("):
            node = self._or()
            if not self._accept(")"):
                raise self._error("Missing closing parenthesis")
            return node
        if self._accept("-"):
            return Negate(self._operand())
        self._pos += 1
        if tok.kind == "number":
            return Literal(float(tok.value) if "." in tok.value else int(tok.value))
        if tok.kind == "string":
            return Literal(_unquote(tok.value))
        if tok.kind == "name":
            if tok.value in _KEYWORDS:
                return Literal(_KEYWORDS[tok.value])
            return Name(tok.value)
        raise self._error(f"Unexpected token {tok.value!r} at position {tok.pos}")


def parse(expression: str) -> Node:
    return _Parser(expression).parse()


def _numeric_pair(left: Any, right: Any) -> tuple[Any, Any]:
    """Compare numeric strings against numbers as numbers."""
    if isinstance(left, bool) or isinstance(right, bool):
        return left, right
    try:
        if isinstance(left, (int, float)) and isinstance(right, str):
            return left, float(right)
        if isinstance(right, (int, float)) and isinstance(left, str):
            return float(left), right
    except ValueError:
        pass
    return left, right


def evaluate_node(node: Node, resolve: Callable[[str], Any]) -> Any:
    """Interpret ``node``; ``resolve`` maps a name to its value or raises."""
    if isinstance(node, Literal):
        return node.value
    if isinstance(node, Name):
        return resolve(node.path)
    if isinstance(node, Not):
        return not evaluate_node(node.operand, resolve)
    if isinstance(node, Negate):
        value = evaluate_node(node.operand, resolve)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConditionEvaluationError(f"Cannot negate non-numeric value {value!r}")
        return -value
    if isinstance(node, BoolOp):
        left = evaluate_node(node.left, resolve)
        if node.op == "and":
            return evaluate_node(node.right, resolve) if left else left
        return left if left else evaluate_node(node.right, resolve)
    if isinstance(node, Compare):
        left = evaluate_node(node.left, resolve)
        right = evaluate_node(node.right, resolve)
        try:
            if node.op == "contains":
                return left is not None and right in left
            left, right = _numeric_pair(left, right)
            return COMPARISON_OPERATORS[node.op](left, right)
        except TypeError as e:
            raise ConditionEvaluationError(f"Cannot compare {left!r} {node.op} {right!r}: {e}") from e
    raise ConditionEvaluationError(f"Unknown expression node: {node!r}")
