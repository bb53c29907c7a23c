"""
Filter engine: the public entry point tying tokenizer, parser, checker and evaluator
together for one field registry.

Example:
    from filterrules import FilterEngine, FieldRegistry

    engine = FilterEngine(FieldRegistry.from_mapping({"price": "number"}))
    engine.validate("price < 350000")          # ValidationResult(valid=True)
    engine.evaluate("price < 350000", {"price": 300000})  # True

    # Validate once, evaluate many
    rule = engine.compile("price < 350000")
    cheap = [record for record in records if rule(record)]
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, TypeVar

from .checker import TypeChecker
from .evaluator import Evaluator, RecordAccessor, get_record_value
from .exceptions import FilterExpressionError
from .models import FieldDefinition, ValidationResult
from .nodes import Node
from .parser import parse
from .registry import PROPERTY_FIELDS, FieldRegistry

logger = logging.getLogger(__name__)

R = TypeVar("R")


@dataclass(frozen=True)
class CompiledFilter:
    """A parsed and type-checked expression, ready to be applied to many records."""

    expression: str
    node: Node
    evaluator: Evaluator

    def matches(self, record: Any) -> bool:
        try:
            return self.evaluator.evaluate(self.node, record)
        except Exception:
            logger.debug(
                "Filter %r failed on record; treating as no match", self.expression, exc_info=True
            )
            return False

    def __call__(self, record: Any) -> bool:
        return self.matches(record)


class FilterEngine:
    """
    Parses, validates and evaluates filter expressions against one record schema.

    The engine holds no mutable state, so one instance may be shared across threads.

    Args:
        registry: Fields expressions may reference (defaults to the property schema)
        accessor: Reads a field value from a record; defaults to key lookup for
            mappings and attribute lookup otherwise
    """

    def __init__(
        self,
        registry: FieldRegistry = PROPERTY_FIELDS,
        *,
        accessor: RecordAccessor = get_record_value,
    ) -> None:
        self._registry = registry
        self._checker = TypeChecker(registry)
        self._evaluator = Evaluator(accessor)

    @property
    def registry(self) -> FieldRegistry:
        return self._registry

    def parse(self, expression: str) -> Node:
        """
        Parse an expression into an AST.

        Raises:
            LexError: On an unterminated string or unrecognized character
            ParseError: If the expression does not match the grammar
        """
        return parse(expression)

    def check(self, node: Node) -> ValidationResult:
        """Type-check a parsed expression against this engine's registry. Never raises."""
        try:
            return self._checker.check(node)
        except Exception as e:
            logger.debug("Unexpected error checking %s", type(node).__name__, exc_info=True)
            return ValidationResult.failed(str(e) or e.__class__.__name__)

    def validate(self, expression: str) -> ValidationResult:
        """
        Parse and type-check an expression. Never raises.

        This is the entry point for rule authoring: call it when a rule is saved so
        broken rules are reported instead of silently matching nothing.
        """
        try:
            node = parse(expression)
            self._checker.infer(node)
        except FilterExpressionError as e:
            logger.debug("Rejected filter expression %r: %s", expression, e)
            return ValidationResult.failed(str(e))
        except Exception as e:
            logger.debug("Unexpected error validating %r", expression, exc_info=True)
            return ValidationResult.failed(str(e) or e.__class__.__name__)
        return ValidationResult.ok()

    def compile(self, expression: str) -> CompiledFilter:
        """
        Parse and type-check an expression once for repeated evaluation.

        Raises:
            FilterExpressionError: The first lex, parse or type error found
        """
        node = parse(expression)
        self._checker.infer(node)
        return CompiledFilter(expression=expression, node=node, evaluator=self._evaluator)

    def evaluate(self, expression: str, record: Any) -> bool:
        """
        Evaluate an expression against a record.

        Fails closed: any parse or runtime error means the record does not match.
        """
        try:
            node = parse(expression)
            return self._evaluator.evaluate(node, record)
        except Exception:
            logger.debug("Filter %r failed; treating as no match", expression, exc_info=True)
            return False

    def evaluate_node(self, node: Node, record: Any) -> bool:
        """Evaluate an already parsed expression against a record (fails closed)."""
        try:
            return self._evaluator.evaluate(node, record)
        except Exception:
            logger.debug("Filter node %r failed; treating as no match", node, exc_info=True)
            return False

    def filter_records(self, expression: str, records: Iterable[R]) -> list[R]:
        """Return the records matching `expression`, in their original order."""
        try:
            node = parse(expression)
        except Exception:
            logger.debug("Filter %r does not parse; no records match", expression)
            return []
        return [record for record in records if self.evaluate_node(node, record)]

    def list_fields(self) -> list[FieldDefinition]:
        """Expose the field registry, e.g. for field pickers in a rule editor."""
        return self._registry.definitions()


@lru_cache(maxsize=1)
def default_engine() -> FilterEngine:
    """Engine bound to the default property field registry."""
    return FilterEngine(PROPERTY_FIELDS)
