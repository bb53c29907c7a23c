from __future__ import annotations

from typing import Any

from filterrules.exceptions import (
    FilterExpressionError,
    FilterTypeError,
    LexError,
    ParseError,
    RegistryError,
)


def expression_error_type(exc: FilterExpressionError) -> str:
    """Envelope `error.type` for a library error."""
    if isinstance(exc, LexError):
        return "lex_error"
    if isinstance(exc, ParseError):
        return "parse_error"
    if isinstance(exc, FilterTypeError):
        return "type_error"
    if isinstance(exc, RegistryError):
        return "config_error"
    return "validation_error"


class CLIError(Exception):
    """
    An error reported to the user.

    Exit codes: 1 for an expression that does not validate, 2 for bad usage or
    configuration.
    """

    def __init__(
        self,
        message: str,
        *,
        exit_code: int = 1,
        error_type: str = "error",
        hint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code
        self.error_type = error_type
        self.hint = hint
        self.details = details

    @classmethod
    def usage(cls, message: str, *, hint: str | None = None) -> CLIError:
        return cls(message, exit_code=2, error_type="usage_error", hint=hint)

    @classmethod
    def config(cls, exc: RegistryError, *, path: str) -> CLIError:
        return cls(exc.message, exit_code=2, error_type="config_error", details={"path": path})

    @classmethod
    def invalid_expression(cls, exc: FilterExpressionError, *, expression: str) -> CLIError:
        """Wrap a lex, parse or type error, keeping the expression for caret rendering."""
        details: dict[str, Any] = {"expression": expression}
        if exc.position is not None:
            details["position"] = exc.position
        return cls(
            exc.message,
            exit_code=1,
            error_type=expression_error_type(exc),
            details=details,
        )

    def __str__(self) -> str:
        return self.message
