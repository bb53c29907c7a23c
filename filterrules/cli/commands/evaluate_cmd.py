from __future__ import annotations

import click
import rich_click

from filterrules.exceptions import FilterExpressionError
from filterrules.nodes import field_names

from ..context import CLIContext
from ..options import output_options, record_options
from ..runner import CommandOutput, run_command
from ._parsing import compile_expression, load_records


@click.command(name="evaluate", cls=rich_click.RichCommand)
@click.argument("expression")
@record_options
@click.option(
    "--lenient",
    is_flag=True,
    help="Skip validation; broken expressions simply match nothing.",
)
@output_options
@click.pass_obj
def evaluate_cmd(
    ctx: CLIContext,
    expression: str,
    *,
    records: tuple[str, ...],
    records_file: str | None,
    lenient: bool,
) -> None:
    """Apply EXPRESSION to records and report which ones match."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        engine = ctx.get_engine()
        loaded = load_records(records=records, records_file=records_file)

        if lenient:
            result = engine.validate(expression)
            if not result.valid:
                warnings.append(
                    f"Expression failed validation ({result.error}); evaluating anyway"
                )
            try:
                fields = field_names(engine.parse(expression))
            except FilterExpressionError:
                fields = []
            matched = [
                (index, record)
                for index, record in enumerate(loaded)
                if engine.evaluate(expression, record)
            ]
        else:
            compiled = compile_expression(engine, expression)
            fields = field_names(compiled.node)
            matched = [(index, record) for index, record in enumerate(loaded) if compiled(record)]

        data = {
            "expression": expression,
            "fields": fields,
            "total": len(loaded),
            "matchedCount": len(matched),
            "matches": [{"index": index, "record": record} for index, record in matched],
        }
        return CommandOutput(data=data, warnings=warnings)

    run_command(ctx, command="evaluate", fn=fn)
