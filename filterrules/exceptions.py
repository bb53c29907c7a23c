"""
Exceptions raised while tokenizing, parsing and type-checking filter expressions.

Every error carries a human-readable message. Lexing and parsing errors also carry the
character offset into the expression where the problem was found.
"""

from __future__ import annotations


class FilterExpressionError(Exception):
    """Base class for all filter expression errors."""

    def __init__(self, message: str, *, position: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.position = position

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, position={self.position!r})"


class LexError(FilterExpressionError):
    """Raised by the tokenizer on an unterminated string or unrecognized character."""

    def __init__(self, message: str, *, position: int) -> None:
        super().__init__(message, position=position)


class ParseError(FilterExpressionError):
    """Raised by the parser when tokens do not match the grammar."""

    def __init__(self, message: str, *, position: int) -> None:
        super().__init__(message, position=position)


class FilterTypeError(FilterExpressionError):
    """
    Raised by the type checker.

    Covers unknown fields, comparisons between different types, and ordering
    operators applied to booleans.
    """

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class RegistryError(FilterExpressionError):
    """Raised when a field registry definition is invalid."""
