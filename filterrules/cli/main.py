from __future__ import annotations

from pathlib import Path

import click
import rich_click

import filterrules

from .context import FIELDS_FILE_ENV, OUTPUT_FORMATS, CLIContext
from .logging import configure_logging, restore_logging


@click.group(
    name="filterrules",
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
    cls=rich_click.RichGroup,
)
@click.option(
    "--output",
    type=click.Choice(OUTPUT_FORMATS),
    default="table",
    help="Output format.",
)
@click.option("--json", "json_flag", is_flag=True, help="Alias for --output json.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-essential stderr output.")
@click.option("-v", "verbose", count=True, help="Increase verbosity (-v, -vv).")
@click.option(
    "--fields",
    "fields_file",
    type=click.Path(dir_okay=False),
    default=None,
    envvar=FIELDS_FILE_ENV,
    help="JSON field registry ([{name, type}] or {name: type}). Defaults to property fields.",
)
@click.version_option(version=filterrules.__version__, prog_name="filterrules")
@click.pass_context
def cli(
    click_ctx: click.Context,
    *,
    output: str,
    json_flag: bool,
    quiet: bool,
    verbose: int,
    fields_file: str | None,
) -> None:
    """Validate filter expressions and apply them to records."""
    if click_ctx.invoked_subcommand is None:
        click.echo(click_ctx.get_help())
        raise click.exceptions.Exit(0)

    out = "json" if json_flag else output
    click_ctx.obj = CLIContext(
        output=out,  # type: ignore[arg-type]
        quiet=quiet,
        verbosity=verbose,
        fields_file=Path(fields_file) if fields_file else None,
    )

    previous_logging = configure_logging(verbosity=verbose)
    click_ctx.call_on_close(lambda: restore_logging(previous_logging))


# Register commands
from .commands.evaluate_cmd import evaluate_cmd as _evaluate_cmd  # noqa: E402
from .commands.fields_cmd import fields_cmd as _fields_cmd  # noqa: E402
from .commands.validate_cmd import validate_cmd as _validate_cmd  # noqa: E402
from .commands.version_cmd import version_cmd as _version_cmd  # noqa: E402

cli.add_command(_version_cmd)
cli.add_command(_fields_cmd)
cli.add_command(_validate_cmd)
cli.add_command(_evaluate_cmd)
