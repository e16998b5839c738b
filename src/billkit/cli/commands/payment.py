"""Payment commands."""

import click

from billkit.cli.display import money, payment_row
from billkit.cli.error_handling import unwrap
from billkit.cli.input_parsing import resolve_cli_amount, resolve_cli_date
from billkit.domain.entities import PaymentMethod, PaymentStatus
from billkit.domain.errors import payment_not_found

METHOD_CHOICES = click.Choice([m.value for m in PaymentMethod], case_sensitive=False)
STATUS_CHOICES = click.Choice([s.value for s in PaymentStatus], case_sensitive=False)


@click.group()
def payment_group():
    """Record and reconcile payments."""
    pass


def _echo_invoice_state(ctx, invoice_id: int) -> None:
    engine = ctx.obj["engine"]
    balance = unwrap(ctx, engine.get_invoice_balance(invoice_id))
    click.echo(
        f"Invoice {balance.invoice.invoice_number}: {balance.invoice.status.value}, "
        f"remaining {money(balance.remaining)}"
    )


@payment_group.command("add")
@click.argument("invoice_id", type=int)
@click.argument("amount")
@click.option("--date", "paid_at", help="Payment date (defaults to today)")
@click.option("--method", type=METHOD_CHOICES, default=PaymentMethod.BANK_TRANSFER.value, show_default=True)
@click.option("--status", type=STATUS_CHOICES, default=PaymentStatus.RECORDED.value, show_default=True)
@click.option("--notes", help="Notes")
@click.pass_context
def add_payment(
    ctx, invoice_id: int, amount: str, paid_at: str | None, method: str, status: str, notes: str | None
):
    """Record a payment of AMOUNT against an invoice.

    Only RECONCILED payments count toward the invoice's paid total.

    Examples:
        billkit payment add 3 60000 --status RECONCILED
        billkit payment add 3 "¥50,000" --method CASH --date 2024-05-01
    """
    engine = ctx.obj["engine"]
    value = resolve_cli_amount(ctx, amount)
    paid_date = resolve_cli_date(ctx, paid_at, "payment date")

    payment = unwrap(
        ctx,
        engine.create_payment(
            invoice_id, value, paid_at=paid_date, method=method, status=status, notes=notes
        ),
    )
    click.echo(f"Recorded payment {payment.id} of {money(payment.amount)} ({payment.status.value})")
    _echo_invoice_state(ctx, invoice_id)


@payment_group.command("list")
@click.option("--status", type=STATUS_CHOICES, help="Filter by status")
@click.option("--search", help="Match invoice number or customer name")
@click.option("--invoice", "invoice_id", type=int, help="Only payments for this invoice")
@click.pass_context
def list_payments(ctx, status: str | None, search: str | None, invoice_id: int | None):
    """List payments, most recent first."""
    engine = ctx.obj["engine"]
    payments = unwrap(ctx, engine.list_payments(status=status, search=search, invoice_id=invoice_id))
    if not payments:
        click.echo("No payments found.")
        return

    click.echo("\nPayments:")
    click.echo("-" * 90)
    for p in payments:
        click.echo(payment_row(p))


@payment_group.command("update")
@click.argument("payment_id", type=int)
@click.option("--amount", help="New amount")
@click.option("--date", "paid_at", help="New payment date")
@click.option("--method", type=METHOD_CHOICES, help="New payment method")
@click.option("--status", type=STATUS_CHOICES, help="New status")
@click.option("--notes", help="New notes")
@click.pass_context
def update_payment(
    ctx,
    payment_id: int,
    amount: str | None,
    paid_at: str | None,
    method: str | None,
    status: str | None,
    notes: str | None,
):
    """Update a payment.

    Updates only the fields that are provided. The invoice status is
    recomputed afterwards.

    Examples:
        billkit payment update 7 --status RECONCILED
        billkit payment update 7 --amount 55000
    """
    engine = ctx.obj["engine"]
    value = resolve_cli_amount(ctx, amount)
    paid_date = resolve_cli_date(ctx, paid_at, "payment date")

    payment = unwrap(
        ctx,
        engine.update_payment(
            payment_id, amount=value, paid_at=paid_date, method=method, status=status, notes=notes
        ),
    )
    click.echo(f"Updated payment {payment.id}")
    _echo_invoice_state(ctx, payment.invoice_id)


@payment_group.command("delete")
@click.argument("payment_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_payment(ctx, payment_id: int, yes: bool):
    """Delete a payment and recompute its invoice's status."""
    engine = ctx.obj["engine"]
    existing = engine.payments.get_payment(payment_id)
    if existing is None:
        click.echo(f"Error: {payment_not_found(payment_id)}", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Are you sure you want to delete payment {payment_id}?"):
        click.echo("Deletion cancelled.")
        return

    unwrap(ctx, engine.delete_payment(payment_id))
    click.echo(f"Deleted payment {payment_id}")
    _echo_invoice_state(ctx, existing.invoice_id)


@payment_group.command("balance")
@click.argument("invoice_id", type=int)
@click.pass_context
def invoice_balance(ctx, invoice_id: int):
    """Show the reconciled total and remaining amount of an invoice."""
    engine = ctx.obj["engine"]
    balance = unwrap(ctx, engine.get_invoice_balance(invoice_id))
    click.echo(f"Invoice:   {balance.invoice.invoice_number} ({balance.invoice.status.value})")
    click.echo(f"Total:     {money(balance.invoice.total)}")
    click.echo(f"Paid:      {money(balance.total_paid)}")
    click.echo(f"Remaining: {money(balance.remaining)}")


def register_commands(cli):
    """Register payment commands with main CLI."""
    cli.add_command(payment_group, name="payment")
