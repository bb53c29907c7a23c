from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from filterrules.engine import FilterEngine
from filterrules.exceptions import FilterExpressionError, RegistryError
from filterrules.registry import PROPERTY_FIELDS, FieldRegistry

from .errors import CLIError, expression_error_type
from .results import CommandMeta, CommandResult, ErrorInfo

OutputFormat = Literal["table", "json"]
OUTPUT_FORMATS: tuple[OutputFormat, ...] = ("table", "json")

FIELDS_FILE_ENV = "FILTERRULES_FIELDS_FILE"


@dataclass
class CLIContext:
    output: OutputFormat
    quiet: bool
    verbosity: int
    fields_file: Path | None

    _engine: FilterEngine | None = None

    @property
    def fields_source(self) -> str:
        return str(self.fields_file) if self.fields_file is not None else "builtin:property"

    def load_registry(self) -> FieldRegistry:
        path = self.fields_file
        if path is None:
            return PROPERTY_FIELDS
        try:
            return FieldRegistry.from_file(path)
        except RegistryError as exc:
            raise CLIError.config(exc, path=str(path)) from exc

    def get_engine(self) -> FilterEngine:
        if self._engine is None:
            self._engine = FilterEngine(self.load_registry())
        return self._engine


def exit_code_for_exception(exc: Exception) -> int:
    if isinstance(exc, CLIError):
        return exc.exit_code
    return 1


def error_info_for_exception(exc: Exception) -> ErrorInfo:
    if isinstance(exc, CLIError):
        return ErrorInfo(
            type=exc.error_type, message=exc.message, hint=exc.hint, details=exc.details
        )
    if isinstance(exc, FilterExpressionError):
        details: dict[str, Any] | None = None
        if exc.position is not None:
            details = {"position": exc.position}
        return ErrorInfo(type=expression_error_type(exc), message=exc.message, details=details)
    return ErrorInfo(type="internal_error", message=str(exc) or exc.__class__.__name__)


def build_result(
    *,
    ok: bool,
    command: str,
    started_at: float,
    data: Any | None,
    warnings: list[str],
    fields_source: str | None,
    error: ErrorInfo | None = None,
) -> CommandResult:
    duration_ms = int(max(0.0, (time.time() - started_at) * 1000))
    meta = CommandMeta(duration_ms=duration_ms, fields_source=fields_source)
    return CommandResult(
        ok=ok,
        command=command,
        data=data,
        warnings=warnings,
        meta=meta,
        error=error,
    )
