"""
AST node types for filter expressions.

The tree is a closed union of five node kinds:
- BinaryOp: `&&` / `||` combination of two expressions
- UnaryOp: `!` negation
- Comparison: `==`, `!=`, `<`, `>`, `<=`, `>=` between two primaries
- FieldRef: reference to a record field
- LiteralValue: number, boolean or string literal

Nodes are frozen, so a parsed tree can be cached and shared between threads.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Literal, Union

from .models import FieldType

LogicalOperator = Literal["&&", "||"]
ComparisonOperator = Literal["==", "!=", "<", ">", "<=", ">="]

COMPARISON_OPERATORS: frozenset[str] = frozenset(["==", "!=", "<", ">", "<=", ">="])
ORDERING_OPERATORS: frozenset[str] = frozenset(["<", ">", "<=", ">="])

# Binding strength, used to decide where to_string() needs parentheses
_PREC_OR = 1
_PREC_AND = 2
_PREC_NOT = 3
_PREC_COMPARISON = 4
_PREC_PRIMARY = 5


def _escape_string(value: str) -> str:
    # Order matters: escape backslashes first
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _format_number(value: int | float) -> str:
    if isinstance(value, int):
        return str(value)
    text = repr(value)
    if "e" in text or "E" in text:
        # The expression language has no exponent notation
        text = format(Decimal(text), "f")
    return text


def _wrap(node: Node, min_prec: int) -> str:
    text = node.to_string()
    return f"({text})" if _precedence(node) < min_prec else text


@dataclass(frozen=True)
class BinaryOp:
    """`&&` / `||` combination of two expressions."""

    op: LogicalOperator
    left: Node
    right: Node

    def to_string(self) -> str:
        prec = _precedence(self)
        first, *rest = chain_operands(self)
        # Left-associative: a right operand at the same level needs parentheses
        parts = [_wrap(first, prec), *(_wrap(operand, prec + 1) for operand in rest)]
        return f" {self.op} ".join(parts)


@dataclass(frozen=True)
class UnaryOp:
    """`!` negation of an expression."""

    op: Literal["!"]
    operand: Node

    def to_string(self) -> str:
        return f"!{_wrap(self.operand, _PREC_NOT)}"


@dataclass(frozen=True)
class Comparison:
    """A single, non-chained comparison between two primaries."""

    op: ComparisonOperator
    left: Node
    right: Node

    def to_string(self) -> str:
        left = _wrap(self.left, _PREC_PRIMARY)
        right = _wrap(self.right, _PREC_PRIMARY)
        return f"{left} {self.op} {right}"


@dataclass(frozen=True)
class FieldRef:
    """A reference to a record field by name."""

    name: str

    def to_string(self) -> str:
        return self.name


@dataclass(frozen=True)
class LiteralValue:
    """
    A literal value tagged with its semantic type.

    Examples:
        LiteralValue(350000, FieldType.NUMBER)
        LiteralValue(True, FieldType.BOOLEAN)
        LiteralValue("house", FieldType.STRING)
    """

    value: int | float | bool | str
    type: FieldType

    def to_string(self) -> str:
        if self.type is FieldType.BOOLEAN:
            return "true" if self.value else "false"
        if self.type is FieldType.STRING:
            return f'"{_escape_string(str(self.value))}"'
        return _format_number(self.value)  # type: ignore[arg-type]


Node = Union[BinaryOp, UnaryOp, Comparison, FieldRef, LiteralValue]


def _precedence(node: Node) -> int:
    if isinstance(node, BinaryOp):
        return _PREC_OR if node.op == "||" else _PREC_AND
    if isinstance(node, UnaryOp):
        return _PREC_NOT
    if isinstance(node, Comparison):
        return _PREC_COMPARISON
    return _PREC_PRIMARY


def chain_operands(node: BinaryOp) -> list[Node]:
    """
    Operands of a left-nested run of the same logical operator, left to right.

    `a && b && c` parses as `(a && b) && c`; this returns `[a, b, c]` without
    recursing, so arbitrarily long chains are walked in constant stack depth.
    """
    operands: list[Node] = []
    current: Node = node
    while isinstance(current, BinaryOp) and current.op == node.op:
        operands.append(current.right)
        current = current.left
    operands.append(current)
    operands.reverse()
    return operands


def field_names(node: Node) -> list[str]:
    """Names of the fields referenced by `node`, in first-appearance order."""
    names: list[str] = []
    stack: list[Node] = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, FieldRef):
            if current.name not in names:
                names.append(current.name)
        elif isinstance(current, (BinaryOp, Comparison)):
            stack.append(current.right)
            stack.append(current.left)
        elif isinstance(current, UnaryOp):
            stack.append(current.operand)
    return names
