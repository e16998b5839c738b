"""Shared text rendering for CLI output."""

from decimal import Decimal

import click

from billkit.domain.entities import Invoice, Payment, Quote


def money(value: Decimal) -> str:
    """Format an amount with thousands separators and two decimals."""
    return f"{value:,.2f}"


def echo_items(items) -> None:
    """Render quote or invoice line items as a table."""
    click.echo(f"{'#':>3} | {'Item':<30} | {'Qty':>8} | {'Unit price':>14} | {'Amount':>14}")
    click.echo("-" * 82)
    for item in items:
        click.echo(
            f"{item.position + 1:>3} | {item.name[:30]:<30} | {item.quantity.normalize():>8} | "
            f"{money(item.unit_price):>14} | {money(item.amount):>14}"
        )
        if item.description:
            click.echo(f"{'':>3}   {item.description}")


def echo_totals(document: Quote | Invoice) -> None:
    click.echo(f"{'Subtotal:':>66} {money(document.subtotal):>14}")
    click.echo(f"{'Tax:':>66} {money(document.tax):>14}")
    click.echo(f"{'Total:':>66} {money(document.total):>14}")


def quote_row(quote: Quote) -> str:
    return (
        f"ID: {quote.id:3d} | {quote.quote_number:<12} | {quote.status.value:<8} | "
        f"{(quote.customer_name or '')[:20]:<20} | {money(quote.total):>14}"
    )


def invoice_row(invoice: Invoice) -> str:
    return (
        f"ID: {invoice.id:3d} | {invoice.invoice_number:<16} | {invoice.status.value:<7} | "
        f"{(invoice.customer_name or '')[:20]:<20} | Due: {invoice.due_date.isoformat()} | "
        f"{money(invoice.total):>14}"
    )


def payment_row(payment: Payment) -> str:
    return (
        f"ID: {payment.id:3d} | {payment.paid_at.isoformat()} | {(payment.invoice_number or ''):<16} | "
        f"{payment.method.value:<13} | {payment.status.value:<10} | {money(payment.amount):>14}"
    )
