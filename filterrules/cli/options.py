"""Option groups shared by subcommands."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

import click

from .context import OUTPUT_FORMATS, CLIContext

F = TypeVar("F", bound=Callable[..., object])


def _override_output(ctx: click.Context, param: click.Parameter, value: str | bool | None) -> None:
    if not value:
        return
    cli_ctx = ctx.find_object(CLIContext)
    if cli_ctx is not None:
        cli_ctx.output = "json" if param.name == "json_flag" else value  # type: ignore[assignment]


def output_options(fn: F) -> F:
    """Accept `--output`/`--json` after the subcommand too, overriding the group setting."""
    fn = click.option(
        "--json",
        "json_flag",
        is_flag=True,
        help="Alias for --output json.",
        callback=_override_output,
        expose_value=False,
    )(fn)
    fn = click.option(
        "--output",
        type=click.Choice(OUTPUT_FORMATS),
        default=None,
        help="Output format for this command.",
        callback=_override_output,
        expose_value=False,
    )(fn)
    return fn


def record_options(fn: F) -> F:
    """Record inputs: repeatable `--record JSON` and `--records-file PATH` ('-' for stdin)."""
    fn = click.option(
        "--records-file",
        type=str,
        default=None,
        help="JSON file holding an object or an array of objects ('-' for stdin).",
    )(fn)
    fn = click.option(
        "--record",
        "records",
        multiple=True,
        help="Record as a JSON object (or array of objects). Repeatable.",
    )(fn)
    return fn
