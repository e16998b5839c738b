"""CLI error handling helpers."""

from typing import Any

import click

from billkit.domain.results import OperationResult


def unwrap(ctx: click.Context, result: OperationResult) -> Any:
    """Return the data of a successful result, or render its error and exit."""
    if not result.success:
        click.echo(f"Error: {result.error}", err=True)
        ctx.exit(1)
    return result.data
