"""
Pydantic models shared by the engine, the registry and the CLI.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from .engine import FilterEngine

FIELD_NAME_PATTERN = r"^[A-Za-z_][A-Za-z0-9_]*$"


class FieldType(str, Enum):
    """Semantic type of a filterable field or literal."""

    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING = "string"

    def __str__(self) -> str:
        return self.value


class FilterModel(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        frozen=True,
    )


class FieldDefinition(FilterModel):
    """A single registry entry: a record field name and its semantic type."""

    name: str = Field(..., pattern=FIELD_NAME_PATTERN)
    type: FieldType


class ValidationResult(FilterModel):
    """Outcome of validating an expression. `error` is set only when invalid."""

    valid: bool
    error: str | None = None

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(valid=True)

    @classmethod
    def failed(cls, error: str) -> ValidationResult:
        return cls(valid=False, error=error)

    def __bool__(self) -> bool:
        return self.valid


class FilterRuleCreate(FilterModel):
    name: str = Field(..., min_length=1, max_length=100)
    expression: str = Field(..., min_length=1)


class FilterRuleUpdate(FilterModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    expression: str | None = Field(None, min_length=1)


class FilterRule(FilterModel):
    """
    A named, persisted filter expression.

    Storage is the host's concern; the rule only carries the `{name, expression}` pair
    and knows how to validate and apply itself through a `FilterEngine`.
    """

    name: str = Field(..., min_length=1, max_length=100)
    expression: str = Field(..., min_length=1)

    def validate_expression(self, engine: FilterEngine | None = None) -> ValidationResult:
        return _engine_or_default(engine).validate(self.expression)

    def matches(self, record: Any, engine: FilterEngine | None = None) -> bool:
        """Evaluate the rule against a record. Broken rules never match."""
        return _engine_or_default(engine).evaluate(self.expression, record)

    def apply(self, updates: FilterRuleUpdate) -> FilterRule:
        """Return a copy of this rule with the non-null fields of `updates` applied."""
        changes = updates.model_dump(exclude_none=True)
        return self.model_copy(update=changes)


def _engine_or_default(engine: FilterEngine | None) -> FilterEngine:
    if engine is not None:
        return engine
    from .engine import default_engine

    return default_engine()
