"""Runs a command body and emits its result envelope."""

from __future__ import annotations

import json
import logging
import sys
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import click
from rich.console import Console

from .context import (
    CLIContext,
    build_result,
    error_info_for_exception,
    exit_code_for_exception,
)
from .render import RenderSettings, render_result
from .results import CommandResult, ErrorInfo

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandOutput:
    """Payload, warnings and exit code produced by a command body."""

    data: Any | None = None
    warnings: list[str] = field(default_factory=list)
    exit_code: int = 0


CommandFn = Callable[[CLIContext, list[str]], CommandOutput]


def emit_result(ctx: CLIContext, result: CommandResult) -> None:
    if ctx.output == "json":
        payload = result.model_dump(by_alias=True, mode="json")
        click.echo(json.dumps(payload, ensure_ascii=False))
        return

    render_result(
        result,
        settings=RenderSettings(quiet=ctx.quiet, verbosity=ctx.verbosity),
    )
    if result.warnings and not ctx.quiet:
        stderr = Console(file=sys.stderr, force_terminal=False)
        for message in result.warnings:
            stderr.print(f"Warning: {message}", markup=False, highlight=False)


def run_command(ctx: CLIContext, *, command: str, fn: CommandFn) -> None:
    """
    Run `fn`, emit its envelope and exit.

    An exception raised by `fn` becomes the envelope's `error`, with the exit code
    from `exit_code_for_exception`. Always ends by raising `click.exceptions.Exit`.
    """
    started = time.time()
    warnings: list[str] = []
    data: Any | None = None
    error: ErrorInfo | None = None
    try:
        out = fn(ctx, warnings)
    except Exception as exc:
        logger.debug("Command %r failed", command, exc_info=True)
        error = error_info_for_exception(exc)
        exit_code = exit_code_for_exception(exc)
    else:
        data = out.data
        warnings = out.warnings or warnings
        exit_code = out.exit_code

    result = build_result(
        ok=error is None,
        command=command,
        started_at=started,
        data=data,
        warnings=warnings,
        fields_source=ctx.fields_source,
        error=error,
    )
    emit_result(ctx, result)
    raise click.exceptions.Exit(exit_code)
