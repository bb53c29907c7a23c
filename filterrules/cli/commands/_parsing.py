from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

from filterrules.engine import CompiledFilter, FilterEngine
from filterrules.exceptions import FilterExpressionError

from ..errors import CLIError


def compile_expression(engine: FilterEngine, expression: str) -> CompiledFilter:
    """Compile or raise a CLIError pointing at the offending position."""
    try:
        return engine.compile(expression)
    except FilterExpressionError as exc:
        raise CLIError.invalid_expression(exc, expression=expression) from exc


def _decode_records(raw: str, *, source: str) -> list[dict[str, Any]]:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise CLIError.usage(f"Invalid JSON in {source}: {exc}") from None

    if isinstance(data, dict):
        return [data]
    if isinstance(data, list) and all(isinstance(item, dict) for item in data):
        return data
    raise CLIError.usage(
        f"{source} must contain a JSON object or an array of objects",
        hint='e.g. --record \'{"price": 300000, "bedrooms": 2}\'',
    )


def load_records(*, records: tuple[str, ...], records_file: str | None) -> list[dict[str, Any]]:
    """Collect records from repeated --record options and/or --records-file ('-' = stdin)."""
    loaded: list[dict[str, Any]] = []
    for raw in records:
        loaded.extend(_decode_records(raw, source="--record"))

    if records_file is not None:
        if records_file == "-":
            content = sys.stdin.read()
        else:
            try:
                content = Path(records_file).read_text(encoding="utf-8")
            except OSError as exc:
                raise CLIError.usage(f"Failed to read records file: {exc}") from None
        loaded.extend(_decode_records(content, source=records_file))

    if not records and records_file is None:
        raise CLIError.usage("No records given. Use --record JSON or --records-file PATH.")
    return loaded
