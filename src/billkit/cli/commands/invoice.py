"""Invoice commands."""

import click

from billkit.cli.display import echo_items, echo_totals, invoice_row, money, payment_row
from billkit.cli.error_handling import unwrap
from billkit.cli.input_parsing import resolve_cli_date, resolve_cli_items
from billkit.cli.commands.quote import ITEM_HELP


@click.group()
def invoice_group():
    """Manage invoices."""
    pass


@invoice_group.command("create")
@click.option("--customer", "customer_id", type=int, required=True, help="Customer ID")
@click.option("--item", "items", multiple=True, required=True, help=ITEM_HELP)
@click.option("--issued", default="today", show_default=True, help="Issue date")
@click.option("--due", required=True, help="Due date (YYYY-MM-DD or offset like '+30d')")
@click.option("--notes", help="Notes printed on the invoice")
@click.pass_context
def create_invoice(ctx, customer_id: int, items: tuple[str, ...], issued: str, due: str, notes: str | None):
    """Create a DRAFT invoice without a quote.

    Examples:
        billkit invoice create --customer 1 --item "Consulting:8:15000" --due +30d
    """
    engine = ctx.obj["engine"]
    line_items = resolve_cli_items(ctx, items)
    issued_at = resolve_cli_date(ctx, issued, "issue date")
    due_date = resolve_cli_date(ctx, due, "due date")

    invoice = unwrap(
        ctx, engine.create_invoice(customer_id, line_items, issued_at=issued_at, due_date=due_date, notes=notes)
    )
    click.echo(f"Created invoice {invoice.invoice_number} (ID: {invoice.id}) total {money(invoice.total)}")


@invoice_group.command("list")
@click.option("--status", help="Filter by status (DRAFT, SENT, OVERDUE, PAID)")
@click.option("--search", help="Match invoice number or customer name")
@click.pass_context
def list_invoices(ctx, status: str | None, search: str | None):
    """List invoices, newest first."""
    engine = ctx.obj["engine"]
    invoices = unwrap(ctx, engine.list_invoices(status=status, search=search))
    if not invoices:
        click.echo("No invoices found.")
        return

    click.echo("\nInvoices:")
    click.echo("-" * 100)
    for inv in invoices:
        click.echo(invoice_row(inv))


@invoice_group.command("show")
@click.argument("invoice_id", type=int)
@click.pass_context
def show_invoice(ctx, invoice_id: int):
    """Show an invoice with its items, payments and balance."""
    engine = ctx.obj["engine"]
    balance = unwrap(ctx, engine.get_invoice_balance(invoice_id))
    payments = unwrap(ctx, engine.list_payments(invoice_id=invoice_id))
    invoice = balance.invoice

    click.echo(f"\nInvoice {invoice.invoice_number} (ID: {invoice.id})")
    click.echo(f"Customer: {invoice.customer_name}")
    click.echo(f"Status:   {invoice.status.value}")
    click.echo(f"Issued:   {invoice.issued_at.isoformat()}")
    click.echo(f"Due:      {invoice.due_date.isoformat()}")
    if invoice.quote_id is not None:
        click.echo(f"Quote:    {invoice.quote_id}")
    if invoice.notes:
        click.echo(f"Notes:    {invoice.notes}")
    click.echo()
    echo_items(invoice.items)
    echo_totals(invoice)
    click.echo(f"{'Paid (reconciled):':>66} {money(balance.total_paid):>14}")
    click.echo(f"{'Remaining:':>66} {money(balance.remaining):>14}")

    if payments:
        click.echo("\nPayments:")
        for p in payments:
            click.echo(payment_row(p))


@invoice_group.command("status")
@click.argument("invoice_id", type=int)
@click.argument("status")
@click.pass_context
def set_invoice_status(ctx, invoice_id: int, status: str):
    """Move an invoice to STATUS.

    Allowed changes: DRAFT -> SENT, SENT -> OVERDUE. PAID is set by
    reconciled payments only.
    """
    engine = ctx.obj["engine"]
    invoice = unwrap(ctx, engine.update_invoice_status(invoice_id, status))
    click.echo(f"Invoice {invoice.invoice_number} is now {invoice.status.value}")


@invoice_group.command("mark-overdue")
@click.option("--as-of", help="Reference date (defaults to today)")
@click.pass_context
def mark_overdue(ctx, as_of: str | None):
    """Mark every SENT invoice past its due date as OVERDUE."""
    engine = ctx.obj["engine"]
    today = resolve_cli_date(ctx, as_of, "reference date")
    changed = unwrap(ctx, engine.mark_overdue_invoices(today))
    if not changed:
        click.echo("No invoices are past due.")
        return

    click.echo(f"Marked {len(changed)} invoice{'s' if len(changed) != 1 else ''} as OVERDUE:")
    for inv in changed:
        click.echo(invoice_row(inv))


@invoice_group.command("delete")
@click.argument("invoice_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_invoice(ctx, invoice_id: int, yes: bool):
    """Delete an invoice together with its items and payments."""
    engine = ctx.obj["engine"]
    if not yes and not click.confirm(f"Are you sure you want to delete invoice {invoice_id}?"):
        click.echo("Deletion cancelled.")
        return

    unwrap(ctx, engine.delete_invoice(invoice_id))
    click.echo(f"Deleted invoice {invoice_id}")


def register_commands(cli):
    """Register invoice commands with main CLI."""
    cli.add_command(invoice_group, name="invoice")
