"""Mapper functions to convert SQLAlchemy models into domain entities.

Status and method columns are stored as plain strings and converted to their
enums here, so the rest of the application only sees typed values.
"""

from decimal import Decimal

from billkit.domain import entities as domain
from billkit.database.models import (
    Customer as ORMCustomer,
    Quote as ORMQuote,
    QuoteItem as ORMQuoteItem,
    Invoice as ORMInvoice,
    InvoiceItem as ORMInvoiceItem,
    Payment as ORMPayment,
)


def _money(value) -> Decimal:
    return Decimal(value) if value is not None else Decimal(0)


def customer_to_domain(orm_customer: ORMCustomer) -> domain.Customer:
    """Convert SQLAlchemy Customer model to domain Customer entity."""
    return domain.Customer(
        id=orm_customer.id,
        owner_id=orm_customer.owner_id,
        name=orm_customer.name,
        email=orm_customer.email,
        phone=orm_customer.phone,
        address=orm_customer.address,
        created_at=orm_customer.created_at,
    )


def quote_item_to_domain(orm_item: ORMQuoteItem) -> domain.QuoteItem:
    """Convert SQLAlchemy QuoteItem model to domain QuoteItem entity."""
    return domain.QuoteItem(
        id=orm_item.id,
        quote_id=orm_item.quote_id,
        position=orm_item.position,
        name=orm_item.name,
        description=orm_item.description,
        quantity=_money(orm_item.quantity),
        unit_price=_money(orm_item.unit_price),
        amount=_money(orm_item.amount),
    )


def invoice_item_to_domain(orm_item: ORMInvoiceItem) -> domain.InvoiceItem:
    """Convert SQLAlchemy InvoiceItem model to domain InvoiceItem entity."""
    return domain.InvoiceItem(
        id=orm_item.id,
        invoice_id=orm_item.invoice_id,
        position=orm_item.position,
        name=orm_item.name,
        description=orm_item.description,
        quantity=_money(orm_item.quantity),
        unit_price=_money(orm_item.unit_price),
        amount=_money(orm_item.amount),
    )


def quote_to_domain(orm_quote: ORMQuote) -> domain.Quote:
    """Convert SQLAlchemy Quote model (with items) to domain Quote entity."""
    return domain.Quote(
        id=orm_quote.id,
        owner_id=orm_quote.owner_id,
        customer_id=orm_quote.customer_id,
        quote_number=orm_quote.quote_number,
        status=domain.QuoteStatus(orm_quote.status),
        issued_at=orm_quote.issued_at,
        valid_until=orm_quote.valid_until,
        subtotal=_money(orm_quote.subtotal),
        tax=_money(orm_quote.tax),
        total=_money(orm_quote.total),
        notes=orm_quote.notes,
        created_at=orm_quote.created_at,
        items=tuple(quote_item_to_domain(item) for item in orm_quote.items),
        customer_name=orm_quote.customer.name if orm_quote.customer is not None else None,
    )


def invoice_to_domain(orm_invoice: ORMInvoice) -> domain.Invoice:
    """Convert SQLAlchemy Invoice model (with items) to domain Invoice entity."""
    return domain.Invoice(
        id=orm_invoice.id,
        owner_id=orm_invoice.owner_id,
        customer_id=orm_invoice.customer_id,
        quote_id=orm_invoice.quote_id,
        invoice_number=orm_invoice.invoice_number,
        status=domain.InvoiceStatus(orm_invoice.status),
        issued_at=orm_invoice.issued_at,
        due_date=orm_invoice.due_date,
        subtotal=_money(orm_invoice.subtotal),
        tax=_money(orm_invoice.tax),
        total=_money(orm_invoice.total),
        paid_amount=_money(orm_invoice.paid_amount),
        notes=orm_invoice.notes,
        created_at=orm_invoice.created_at,
        items=tuple(invoice_item_to_domain(item) for item in orm_invoice.items),
        customer_name=orm_invoice.customer.name if orm_invoice.customer is not None else None,
    )


def payment_to_domain(orm_payment: ORMPayment) -> domain.Payment:
    """Convert SQLAlchemy Payment model to domain Payment entity."""
    invoice = orm_payment.invoice
    return domain.Payment(
        id=orm_payment.id,
        owner_id=orm_payment.owner_id,
        invoice_id=orm_payment.invoice_id,
        amount=_money(orm_payment.amount),
        paid_at=orm_payment.paid_at,
        method=domain.PaymentMethod(orm_payment.method),
        status=domain.PaymentStatus(orm_payment.status),
        notes=orm_payment.notes,
        created_at=orm_payment.created_at,
        invoice_number=invoice.invoice_number if invoice is not None else None,
        customer_name=(
            invoice.customer.name
            if invoice is not None and invoice.customer is not None
            else None
        ),
    )
