from __future__ import annotations

import click
import rich_click

from filterrules.models import FieldType

from ..context import CLIContext
from ..options import output_options
from ..runner import CommandOutput, run_command


@click.command(name="fields", cls=rich_click.RichCommand)
@click.option(
    "--type",
    "field_type",
    type=click.Choice([t.value for t in FieldType]),
    default=None,
    help="Only list fields of this type.",
)
@output_options
@click.pass_obj
def fields_cmd(ctx: CLIContext, *, field_type: str | None) -> None:
    """List the fields expressions may reference."""

    def fn(ctx: CLIContext, _warnings: list[str]) -> CommandOutput:
        fields = ctx.get_engine().list_fields()
        if field_type is not None:
            fields = [f for f in fields if f.type.value == field_type]
        payload = [f.model_dump(mode="json") for f in fields]
        return CommandOutput(data={"fields": payload})

    run_command(ctx, command="fields", fn=fn)
