"""Tests for database mappers."""

import pytest
from datetime import datetime, date, UTC
from decimal import Decimal

from billkit.database.models import (
    Customer as ORMCustomer,
    Quote as ORMQuote,
    QuoteItem as ORMQuoteItem,
    Invoice as ORMInvoice,
    InvoiceItem as ORMInvoiceItem,
    Payment as ORMPayment,
)
from billkit.database.mappers import (
    customer_to_domain,
    quote_to_domain,
    invoice_to_domain,
    payment_to_domain,
)
from billkit.domain.entities import (
    Customer,
    Invoice,
    InvoiceStatus,
    Payment,
    PaymentMethod,
    PaymentStatus,
    Quote,
    QuoteItem,
    QuoteStatus,
)


def _orm_customer():
    return ORMCustomer(
        id=1,
        owner_id="alice",
        name="Acme Corp",
        email="billing@acme.example",
        phone=None,
        address=None,
        created_at=datetime.now(UTC),
    )


class TestCustomerMapper:
    """Tests for Customer mapper."""

    def test_customer_to_domain(self):
        """Test converting ORM Customer to domain Customer."""
        orm_customer = _orm_customer()
        domain_customer = customer_to_domain(orm_customer)

        assert isinstance(domain_customer, Customer)
        assert domain_customer.id == 1
        assert domain_customer.owner_id == "alice"
        assert domain_customer.email == "billing@acme.example"
        assert domain_customer.created_at == orm_customer.created_at


class TestQuoteMapper:
    """Tests for Quote mapper."""

    def test_quote_to_domain(self):
        """Test converting ORM Quote with items to domain Quote."""
        orm_quote = ORMQuote(
            id=5,
            owner_id="alice",
            customer_id=1,
            quote_number="QT-2024-0001",
            status="SENT",
            issued_at=date(2024, 1, 15),
            valid_until=None,
            subtotal=Decimal("1000"),
            tax=Decimal("100"),
            total=Decimal("1100"),
            notes=None,
            created_at=datetime.now(UTC),
            customer=_orm_customer(),
            items=[
                ORMQuoteItem(
                    id=1,
                    quote_id=5,
                    position=0,
                    name="Work",
                    description=None,
                    quantity=Decimal("2"),
                    unit_price=Decimal("500"),
                    amount=Decimal("1000"),
                )
            ],
        )
        domain_quote = quote_to_domain(orm_quote)

        assert isinstance(domain_quote, Quote)
        assert domain_quote.status == QuoteStatus.SENT
        assert domain_quote.customer_name == "Acme Corp"
        assert isinstance(domain_quote.items, tuple)
        assert isinstance(domain_quote.items[0], QuoteItem)
        assert domain_quote.items[0].amount == Decimal("1000")


class TestInvoiceMapper:
    """Tests for Invoice mapper."""

    def test_invoice_to_domain(self):
        """Test converting ORM Invoice to domain Invoice, defaulting paid_amount to 0."""
        orm_invoice = ORMInvoice(
            id=3,
            owner_id="alice",
            customer_id=1,
            quote_id=None,
            invoice_number="INV-20240115-001",
            status="OVERDUE",
            issued_at=date(2024, 1, 15),
            due_date=date(2024, 2, 14),
            subtotal=Decimal("1000"),
            tax=Decimal("100"),
            total=Decimal("1100"),
            paid_amount=None,
            notes="Net 30",
            created_at=datetime.now(UTC),
            items=[
                ORMInvoiceItem(
                    id=1,
                    invoice_id=3,
                    position=0,
                    name="Work",
                    quantity=Decimal("1"),
                    unit_price=Decimal("1000"),
                    amount=Decimal("1000"),
                )
            ],
        )
        domain_invoice = invoice_to_domain(orm_invoice)

        assert isinstance(domain_invoice, Invoice)
        assert domain_invoice.status == InvoiceStatus.OVERDUE
        assert domain_invoice.paid_amount == Decimal("0")
        assert domain_invoice.customer_name is None
        assert domain_invoice.items[0].invoice_id == 3


class TestPaymentMapper:
    """Tests for Payment mapper."""

    def test_payment_to_domain(self):
        """Test converting ORM Payment to domain Payment with typed enums."""
        orm_payment = ORMPayment(
            id=9,
            owner_id="alice",
            invoice_id=3,
            amount=Decimal("500"),
            paid_at=date(2024, 1, 20),
            method="CREDIT_CARD",
            status="RECONCILED",
            notes=None,
            created_at=datetime.now(UTC),
        )
        domain_payment = payment_to_domain(orm_payment)

        assert isinstance(domain_payment, Payment)
        assert domain_payment.method == PaymentMethod.CREDIT_CARD
        assert domain_payment.status == PaymentStatus.RECONCILED
        assert domain_payment.invoice_number is None

    def test_unknown_status_raises(self):
        """Legacy status strings do not map silently."""
        orm_payment = ORMPayment(
            id=9,
            owner_id="alice",
            invoice_id=3,
            amount=Decimal("500"),
            paid_at=date(2024, 1, 20),
            method="CASH",
            status="PENDING",
            created_at=datetime.now(UTC),
        )
        with pytest.raises(ValueError):
            payment_to_domain(orm_payment)
