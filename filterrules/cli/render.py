from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from typing import Any

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .results import CommandResult


@dataclass(frozen=True, slots=True)
class RenderSettings:
    quiet: bool
    verbosity: int


def _error_title(error_type: str) -> str:
    mapping = {
        "usage_error": "Usage error",
        "validation_error": "Invalid expression",
        "lex_error": "Invalid expression",
        "parse_error": "Invalid expression",
        "type_error": "Invalid expression",
        "config_error": "Configuration error",
        "internal_error": "Internal error",
    }
    return mapping.get((error_type or "").strip(), "Error")


def _caret_lines(expression: str, position: int) -> Text:
    """Point at the offending character of a single-line expression."""
    position = max(0, min(position, len(expression)))
    text = Text("  ")
    text.append(expression)
    text.append("\n  " + " " * position)
    text.append("^", style="bold red")
    return text


def _render_error_details(
    *,
    stderr: Console,
    command: str,
    error_type: str,
    hint: str | None,
    details: dict[str, Any] | None,
    settings: RenderSettings,
) -> None:
    if settings.quiet:
        return

    if details:
        expression = details.get("expression")
        position = details.get("position")
        if isinstance(expression, str) and isinstance(position, int) and "\n" not in expression:
            stderr.print(_caret_lines(expression, position))

    if hint:
        stderr.print(f"Hint: {hint}", markup=False, highlight=False)
    elif error_type == "usage_error":
        stderr.print(f"Hint: run `filterrules {command} --help`")

    if details and settings.verbosity >= 2:
        stderr.print(Panel.fit(Text(json.dumps(details, ensure_ascii=False, indent=2))))


def _fields_table(fields: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("name")
    table.add_column("type")
    for field in fields:
        table.add_row(str(field.get("name", "")), str(field.get("type", "")))
    return table


def _format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _evaluate_renderable(data: dict[str, Any]) -> Group:
    matches = data.get("matches") or []
    columns = ["index", *(data.get("fields") or [])]
    table = Table(show_header=True, header_style="bold")
    for col in columns:
        table.add_column(col)
    for match in matches:
        record = match.get("record") or {}
        row = [str(match.get("index", ""))]
        row.extend(_format_cell(record.get(col)) for col in columns[1:])
        table.add_row(*row)
    summary = Text(f"{data.get('matchedCount', 0)} of {data.get('total', 0)} records match")
    if not matches:
        return Group(summary)
    return Group(table, summary)


def _kv_table(obj: dict[str, Any]) -> Table:
    table = Table(show_header=False, box=None)
    table.add_column("key", style="bold")
    table.add_column("value")
    for key, value in obj.items():
        table.add_row(str(key), _format_cell(value))
    return table


def render_result(result: CommandResult, *, settings: RenderSettings) -> None:
    """Print a command result for humans: data to stdout, errors to stderr."""
    stdout = Console(file=sys.stdout, force_terminal=False)
    stderr = Console(file=sys.stderr, force_terminal=False)

    if not result.ok:
        if result.error is not None:
            title = _error_title(result.error.type)
            stderr.print(
                f"{title}: {result.error.message}", markup=False, highlight=False, soft_wrap=True
            )
            _render_error_details(
                stderr=stderr,
                command=result.command,
                error_type=result.error.type,
                hint=result.error.hint,
                details=result.error.details,
                settings=settings,
            )
        else:
            stderr.print("Error")
        return

    data = result.data
    renderable: Any
    if result.command == "version" and isinstance(data, dict):
        renderable = Text(data.get("version", ""), style="bold")
    elif result.command == "validate" and isinstance(data, dict):
        renderable = Text.assemble(("Valid", "bold green"), f": {data.get('canonical', '')}")
    elif result.command == "evaluate" and isinstance(data, dict):
        renderable = _evaluate_renderable(data)
    elif result.command == "fields" and isinstance(data, dict):
        renderable = _fields_table(data.get("fields") or [])
    elif isinstance(data, dict):
        renderable = _kv_table(data)
    elif data is None:
        renderable = None
    else:
        renderable = Text(_format_cell(data))

    if renderable is not None:
        stdout.print(renderable)
