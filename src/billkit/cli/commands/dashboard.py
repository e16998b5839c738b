"""Dashboard command."""

import click

from billkit.cli.display import invoice_row, money, payment_row, quote_row
from billkit.cli.error_handling import unwrap
from billkit.cli.input_parsing import resolve_cli_date


@click.command("dashboard")
@click.option("--as-of", help="Reference date for 'this month' (defaults to today)")
@click.pass_context
def dashboard(ctx, as_of: str | None):
    """Show monthly sales, payments, unpaid totals and recent documents."""
    engine = ctx.obj["engine"]
    today = resolve_cli_date(ctx, as_of, "reference date")
    kpi = unwrap(ctx, engine.get_dashboard(today))

    click.echo(f"\n{'Monthly sales:':<24}{money(kpi.monthly_sales):>16}")
    click.echo(f"{'Monthly payments:':<24}{money(kpi.monthly_payments):>16}")
    click.echo(f"{'Total unpaid:':<24}{money(kpi.total_unpaid):>16}")
    click.echo(f"{'Customers:':<24}{kpi.customer_count:>16}")

    click.echo("\nInvoices by status:")
    for status, count in kpi.status_counts.items():
        click.echo(f"  {status:<10}{count:>5}")

    if kpi.overdue_invoices:
        click.echo("\nPast due:")
        for inv in kpi.overdue_invoices:
            click.echo(invoice_row(inv))

    if kpi.recent_quotes:
        click.echo("\nRecent quotes:")
        for q in kpi.recent_quotes:
            click.echo(quote_row(q))

    if kpi.recent_invoices:
        click.echo("\nRecent invoices:")
        for inv in kpi.recent_invoices:
            click.echo(invoice_row(inv))

    if kpi.recent_payments:
        click.echo("\nRecent payments:")
        for p in kpi.recent_payments:
            click.echo(payment_row(p))


def register_commands(cli):
    """Register dashboard command with main CLI."""
    cli.add_command(dashboard)
