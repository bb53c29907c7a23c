"""
Static type checker for parsed filter expressions.

Rules:
- A field reference must exist in the registry; its type comes from the registry.
- A literal has its tagged type.
- Both sides of a comparison must have the same type. Booleans only support `==`
  and `!=`.
- `&&`, `||` and `!` only require their operands to be valid themselves. A bare
  field used as a logical operand is accepted and evaluated by truthiness.
- Comparisons and logical operations have type boolean when used as an operand.
"""

from __future__ import annotations

from .exceptions import FilterTypeError
from .models import FieldType, ValidationResult
from .nodes import (
    ORDERING_OPERATORS,
    BinaryOp,
    Comparison,
    FieldRef,
    LiteralValue,
    Node,
    UnaryOp,
    chain_operands,
)
from .registry import FieldRegistry


class TypeChecker:
    """Read-only type checker bound to a field registry."""

    def __init__(self, registry: FieldRegistry):
        self.registry = registry

    def infer(self, node: Node) -> FieldType:
        """
        Return the semantic type of `node`.

        Raises:
            FilterTypeError: On the first problem found, checking left operands
                before right operands.
        """
        if isinstance(node, FieldRef):
            field_type = self.registry.type_of(node.name)
            if field_type is None:
                raise FilterTypeError(f"Unknown field: '{node.name}'", field=node.name)
            return field_type

        if isinstance(node, LiteralValue):
            return node.type

        if isinstance(node, Comparison):
            left_type = self.infer(node.left)
            right_type = self.infer(node.right)
            if left_type is not right_type:
                raise FilterTypeError(
                    f"type mismatch: cannot compare {left_type.value} with {right_type.value}"
                )
            if left_type is FieldType.BOOLEAN and node.op in ORDERING_OPERATORS:
                raise FilterTypeError(
                    f"Invalid operator '{node.op}' for boolean comparison; "
                    "only == and != are supported"
                )
            return FieldType.BOOLEAN

        if isinstance(node, BinaryOp):
            for operand in chain_operands(node):
                self.infer(operand)
            return FieldType.BOOLEAN

        if isinstance(node, UnaryOp):
            self.infer(node.operand)
            return FieldType.BOOLEAN

        raise FilterTypeError(f"Unknown AST node type: {type(node).__name__}")

    def check(self, node: Node) -> ValidationResult:
        """Type-check `node`, reporting the first error instead of raising it."""
        try:
            self.infer(node)
        except FilterTypeError as e:
            return ValidationResult.failed(str(e))
        return ValidationResult.ok()
