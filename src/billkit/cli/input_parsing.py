"""CLI helpers turning option strings into typed values."""

from datetime import date
from decimal import Decimal

import click

from billkit.domain.entities import LineItemInput
from billkit.utils.amount_parser import parse_amount
from billkit.utils.date_parser import parse_date
from billkit.utils.item_parser import parse_item_spec


def resolve_cli_date(ctx, value: str | None, label: str) -> date | None:
    """Parse an optional date option, exiting with an error message on failure."""
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def resolve_cli_amount(ctx, value: str | None) -> Decimal | None:
    """Parse an optional amount option, exiting with an error message on failure."""
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)


def resolve_cli_items(ctx, specs: tuple[str, ...]) -> list[LineItemInput]:
    """Parse repeated --item options."""
    items = []
    for spec in specs:
        try:
            items.append(parse_item_spec(spec))
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)
    return items
