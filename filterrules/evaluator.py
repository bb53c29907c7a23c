"""
Evaluator: reduces a parsed expression to a boolean for one record.

Null handling: a field that is missing, null, or holds a value the engine cannot compare
(dates, lists, nested objects) evaluates to None. Any comparison with None is False,
for every operator including `!=`. An unknown value never satisfies a filter.
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Mapping
from typing import Any, Union

from .nodes import BinaryOp, Comparison, FieldRef, LiteralValue, Node, UnaryOp, chain_operands

Value = Union[bool, int, float, str, None]
RecordAccessor = Callable[[Any, str], Any]

_ORDERING: dict[str, Callable[[Any, Any], bool]] = {
    "<": operator.lt,
    ">": operator.gt,
    "<=": operator.le,
    ">=": operator.ge,
}


def get_record_value(record: Any, field_name: str) -> Any:
    """
    Read a field from a record.

    Mappings are read by key; anything else (pydantic models, dataclasses, plain
    objects) by attribute. Missing fields read as None.
    """
    if isinstance(record, Mapping):
        return record.get(field_name)
    return getattr(record, field_name, None)


def _comparable(value: Any) -> Value:
    if isinstance(value, (bool, int, float, str)):
        return value
    return None


def _is_number(value: Value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _strict_equal(left: Value, right: Value) -> bool:
    # true must not equal 1: values of different kinds are never equal
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if _is_number(left) and _is_number(right):
        return left == right
    return type(left) is type(right) and left == right


def is_truthy(value: Value) -> bool:
    """None, False, 0 and the empty string are falsy; everything else is truthy."""
    return bool(value)


class Evaluator:
    """Pure, reentrant evaluator. Never mutates the AST or the record."""

    def __init__(self, accessor: RecordAccessor = get_record_value):
        self.accessor = accessor

    def evaluate(self, node: Node, record: Any) -> bool:
        return is_truthy(self._value(node, record))

    def _value(self, node: Node, record: Any) -> Value:
        if isinstance(node, BinaryOp):
            # all/any stop at the first operand that decides the result
            operands = (self._value(operand, record) for operand in chain_operands(node))
            if node.op == "&&":
                return all(is_truthy(value) for value in operands)
            if node.op == "||":
                return any(is_truthy(value) for value in operands)
            return False

        if isinstance(node, UnaryOp):
            return not is_truthy(self._value(node.operand, record))

        if isinstance(node, Comparison):
            left = self._value(node.left, record)
            right = self._value(node.right, record)
            return self._compare(node.op, left, right)

        if isinstance(node, FieldRef):
            return _comparable(self.accessor(record, node.name))

        if isinstance(node, LiteralValue):
            return node.value

        return False

    @staticmethod
    def _compare(op: str, left: Value, right: Value) -> bool:
        if left is None or right is None:
            return False
        if op == "==":
            return _strict_equal(left, right)
        if op == "!=":
            return not _strict_equal(left, right)
        ordering = _ORDERING.get(op)
        if ordering is None or not (_is_number(left) and _is_number(right)):
            return False
        return ordering(left, right)
