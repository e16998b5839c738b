"""Quote commands."""

import click

from billkit.cli.display import echo_items, echo_totals, quote_row
from billkit.cli.error_handling import unwrap
from billkit.cli.input_parsing import resolve_cli_date, resolve_cli_items

ITEM_HELP = "Line item as NAME:QUANTITY:UNIT_PRICE[:DESCRIPTION] (repeatable)"


@click.group()
def quote_group():
    """Manage quotes."""
    pass


@quote_group.command("create")
@click.option("--customer", "customer_id", type=int, required=True, help="Customer ID")
@click.option("--item", "items", multiple=True, required=True, help=ITEM_HELP)
@click.option("--issued", help="Issue date (YYYY-MM-DD or relative like 'today')")
@click.option("--valid-until", help="Expiry date (YYYY-MM-DD or offset like '+30d')")
@click.option("--notes", help="Notes printed on the quote")
@click.pass_context
def create_quote(
    ctx, customer_id: int, items: tuple[str, ...], issued: str | None, valid_until: str | None, notes: str | None
):
    """Create a DRAFT quote.

    Examples:
        billkit quote create --customer 1 --item "Design:10:5000" --item "Hosting:1:20000"
        billkit quote create --customer 1 --item "Audit:1:300000:Security review" --valid-until +30d
    """
    engine = ctx.obj["engine"]
    line_items = resolve_cli_items(ctx, items)
    issued_at = resolve_cli_date(ctx, issued, "issue date")
    valid_until_date = resolve_cli_date(ctx, valid_until, "valid-until date")

    quote = unwrap(
        ctx,
        engine.create_quote(
            customer_id, line_items, issued_at=issued_at, valid_until=valid_until_date, notes=notes
        ),
    )
    click.echo(f"Created quote {quote.quote_number} (ID: {quote.id}) total {quote.total:,.2f}")


@quote_group.command("list")
@click.option("--status", help="Filter by status (DRAFT, SENT, ACCEPTED, REJECTED)")
@click.option("--search", help="Match quote number or customer name")
@click.option("--verbose", "-v", is_flag=True, help="Show line items")
@click.pass_context
def list_quotes(ctx, status: str | None, search: str | None, verbose: bool):
    """List quotes, newest first."""
    engine = ctx.obj["engine"]
    quotes = unwrap(ctx, engine.list_quotes(status=status, search=search))
    if not quotes:
        click.echo("No quotes found.")
        return

    click.echo("\nQuotes:")
    click.echo("-" * 80)
    for q in quotes:
        click.echo(quote_row(q))
        if verbose:
            echo_items(q.items)
            echo_totals(q)
            click.echo()


def _change_status(ctx, quote_id: int, status: str) -> None:
    engine = ctx.obj["engine"]
    quote = unwrap(ctx, engine.update_quote_status(quote_id, status))
    click.echo(f"Quote {quote.quote_number} is now {quote.status.value}")


@quote_group.command("send")
@click.argument("quote_id", type=int)
@click.pass_context
def send_quote(ctx, quote_id: int):
    """Mark a DRAFT quote as SENT."""
    _change_status(ctx, quote_id, "SENT")


@quote_group.command("accept")
@click.argument("quote_id", type=int)
@click.pass_context
def accept_quote(ctx, quote_id: int):
    """Mark a SENT quote as ACCEPTED."""
    _change_status(ctx, quote_id, "ACCEPTED")


@quote_group.command("reject")
@click.argument("quote_id", type=int)
@click.pass_context
def reject_quote(ctx, quote_id: int):
    """Mark a SENT quote as REJECTED."""
    _change_status(ctx, quote_id, "REJECTED")


@quote_group.command("status")
@click.argument("quote_id", type=int)
@click.argument("status")
@click.pass_context
def set_quote_status(ctx, quote_id: int, status: str):
    """Move a quote to STATUS.

    Allowed changes: DRAFT -> SENT, SENT -> ACCEPTED, SENT -> REJECTED.
    """
    _change_status(ctx, quote_id, status)


@quote_group.command("delete")
@click.argument("quote_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_quote(ctx, quote_id: int, yes: bool):
    """Delete a quote and its items.

    An invoice converted from the quote is kept.
    """
    engine = ctx.obj["engine"]
    if not yes and not click.confirm(f"Are you sure you want to delete quote {quote_id}?"):
        click.echo("Deletion cancelled.")
        return

    unwrap(ctx, engine.delete_quote(quote_id))
    click.echo(f"Deleted quote {quote_id}")


@quote_group.command("convert")
@click.argument("quote_id", type=int)
@click.pass_context
def convert_quote(ctx, quote_id: int):
    """Create a DRAFT invoice from an ACCEPTED quote."""
    engine = ctx.obj["engine"]
    invoice = unwrap(ctx, engine.convert_quote_to_invoice(quote_id))
    click.echo(
        f"Created invoice {invoice.invoice_number} (ID: {invoice.id}) from quote {quote_id}, "
        f"due {invoice.due_date.isoformat()}"
    )


def register_commands(cli):
    """Register quote commands with main CLI."""
    cli.add_command(quote_group, name="quote")
