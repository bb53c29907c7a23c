"""
Filter rules: named boolean predicates over records.

Expressions compare record fields with literals and combine comparisons with `&&`,
`||` and `!`:

    price < 350000 && bedrooms >= 2
    (petsAllowed == true || storageIncluded == true) && status != "rejected"

Example:
    import filterrules

    filterrules.validate("price == true")
    # ValidationResult(valid=False, error="type mismatch: cannot compare number with boolean")

    filterrules.evaluate("price < 350000", {"price": 300000})  # True

The module-level functions use the default property field registry. Build a
`FilterEngine` with your own `FieldRegistry` for other record schemas.
"""

from __future__ import annotations

from typing import Any

from .checker import TypeChecker
from .engine import CompiledFilter, FilterEngine, default_engine
from .evaluator import Evaluator, get_record_value, is_truthy
from .exceptions import (
    FilterExpressionError,
    FilterTypeError,
    LexError,
    ParseError,
    RegistryError,
)
from .models import (
    FieldDefinition,
    FieldType,
    FilterRule,
    FilterRuleCreate,
    FilterRuleUpdate,
    ValidationResult,
)
from .nodes import BinaryOp, Comparison, FieldRef, LiteralValue, Node, UnaryOp, field_names
from .parser import Parser, parse, parse_tokens
from .registry import PROPERTY_FIELDS, FieldRegistry
from .tokenizer import Token, Tokenizer, TokenType, tokenize

__version__ = "0.1.0"


def validate(expression: str) -> ValidationResult:
    """Parse and type-check against the default registry. Never raises."""
    return default_engine().validate(expression)


def evaluate(expression: str, record: Any) -> bool:
    """Evaluate against a record using the default registry. Fails closed."""
    return default_engine().evaluate(expression, record)


def list_fields() -> list[FieldDefinition]:
    """Fields of the default registry."""
    return default_engine().list_fields()


__all__ = [
    "PROPERTY_FIELDS",
    "BinaryOp",
    "Comparison",
    "CompiledFilter",
    "Evaluator",
    "FieldDefinition",
    "FieldRef",
    "FieldRegistry",
    "FieldType",
    "FilterEngine",
    "FilterExpressionError",
    "FilterRule",
    "FilterRuleCreate",
    "FilterRuleUpdate",
    "FilterTypeError",
    "LexError",
    "LiteralValue",
    "Node",
    "ParseError",
    "Parser",
    "RegistryError",
    "Token",
    "TokenType",
    "Tokenizer",
    "TypeChecker",
    "UnaryOp",
    "ValidationResult",
    "__version__",
    "default_engine",
    "evaluate",
    "field_names",
    "get_record_value",
    "is_truthy",
    "list_fields",
    "parse",
    "parse_tokens",
    "tokenize",
    "validate",
]
