from __future__ import annotations

import click
import rich_click

from filterrules.nodes import field_names

from ..context import CLIContext
from ..options import output_options
from ..runner import CommandOutput, run_command
from ._parsing import compile_expression


@click.command(name="validate", cls=rich_click.RichCommand)
@click.argument("expression")
@output_options
@click.pass_obj
def validate_cmd(ctx: CLIContext, expression: str) -> None:
    """Parse and type-check EXPRESSION against the field registry.

    Exits 0 when the expression is valid and 1 when it is not.
    """

    def fn(ctx: CLIContext, _warnings: list[str]) -> CommandOutput:
        compiled = compile_expression(ctx.get_engine(), expression)
        data = {
            "valid": True,
            "expression": expression,
            "canonical": compiled.node.to_string(),
            "fields": field_names(compiled.node),
        }
        return CommandOutput(data=data)

    run_command(ctx, command="validate", fn=fn)
