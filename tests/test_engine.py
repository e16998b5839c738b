"""Tests for the InvoicingEngine facade."""

import logging
import pytest
from datetime import date
from decimal import Decimal

from billkit.domain.entities import InvoiceStatus, QuoteStatus
from billkit.domain.errors import NotFoundError, OwnerContextError, ValidationError
from billkit.domain.results import OperationResult
from billkit.engine import InvoicingEngine, to_line_items

ITEMS = [{"name": "Design", "quantity": 10, "unit_price": "45000"}, {"name": "Hosting", "quantity": 1, "unitPrice": 50000}]


def _accepted_quote(engine, customer_id):
    quote = engine.create_quote(customer_id, ITEMS).data
    engine.update_quote_status(quote.id, "SENT")
    engine.update_quote_status(quote.id, "ACCEPTED")
    return quote


class TestOperationResult:
    """Tests for the result envelope."""

    def test_ok(self):
        """Successful results carry data and no error."""
        result = OperationResult.ok({"id": 1})
        assert result.success
        assert result.to_dict() == {"success": True, "data": {"id": 1}}

    def test_fail(self):
        """Failed results carry the message and the error kind."""
        result = OperationResult.fail(NotFoundError("Quote 1 not found"))
        assert not result.success
        assert result.data is None
        assert result.to_dict() == {
            "success": False,
            "error": "Quote 1 not found",
            "error_kind": "not_found",
        }


class TestEngine:
    """Tests for engine operations and error kinds."""

    def test_owner_is_required(self, temp_db):
        """A missing owner is a programming error, not a failed result."""
        with pytest.raises(OwnerContextError):
            InvoicingEngine(temp_db, "")
        with pytest.raises(OwnerContextError):
            InvoicingEngine(temp_db, None)

    def test_full_cycle(self, engine):
        """Customer, quote, conversion, payment and dashboard through the engine."""
        customer = engine.create_customer("Acme Corp").data
        quote = _accepted_quote(engine, customer.id)
        assert engine.get_quote(quote.id).data.status == QuoteStatus.ACCEPTED

        converted = engine.convert_quote_to_invoice(quote.id)
        assert converted.success
        invoice = converted.data
        assert invoice.total == Decimal("550000")

        assert engine.update_invoice_status(invoice.id, "SENT").data.status == InvoiceStatus.SENT
        paid = engine.create_payment(invoice.id, "550000", status="RECONCILED")
        assert paid.success
        assert engine.get_invoice(invoice.id).data.status == InvoiceStatus.PAID

        balance = engine.get_invoice_balance(invoice.id).data
        assert balance.remaining == Decimal("0")

        kpi = engine.get_dashboard(date(2024, 1, 20)).data
        assert kpi.monthly_sales == Decimal("550000")
        assert kpi.monthly_payments == Decimal("550000")
        assert kpi.status_counts["PAID"] == 1

    def test_validation_failure(self, engine):
        """Validation problems come back as failed results."""
        customer = engine.create_customer("Acme Corp").data
        result = engine.create_quote(customer.id, [])

        assert not result.success
        assert result.error_kind == "validation"
        assert "At least one line item" in result.error

    def test_not_found_failure(self, engine):
        """Unknown ids are reported with the not_found kind."""
        result = engine.convert_quote_to_invoice(999)
        assert result.error_kind == "not_found"
        assert result.error == "Quote 999 not found"

    def test_invalid_transition_failure(self, engine):
        """Converting a draft and marking PAID by hand are transition failures."""
        customer = engine.create_customer("Acme Corp").data
        quote = engine.create_quote(customer.id, ITEMS).data

        assert engine.convert_quote_to_invoice(quote.id).error_kind == "invalid_transition"

        invoice = engine.create_invoice(
            customer.id, ITEMS, issued_at=date(2024, 1, 15), due_date=date(2024, 2, 14)
        ).data
        assert engine.update_invoice_status(invoice.id, "PAID").error_kind == "invalid_transition"

    def test_conflict_failure(self, engine):
        """A second conversion is a conflict and leaves one invoice."""
        customer = engine.create_customer("Acme Corp").data
        quote = _accepted_quote(engine, customer.id)

        assert engine.convert_quote_to_invoice(quote.id).success
        second = engine.convert_quote_to_invoice(quote.id)

        assert second.error_kind == "conflict"
        assert len(engine.list_invoices().data) == 1

    def test_dependency_failure(self, engine):
        """Customers with documents cannot be deleted."""
        customer = engine.create_customer("Acme Corp").data
        engine.create_quote(customer.id, ITEMS)

        result = engine.delete_customer(customer.id)
        assert result.error_kind == "dependency"

    def test_delete_returns_no_data(self, engine):
        """Deletes succeed with no data."""
        customer = engine.create_customer("Acme Corp").data
        result = engine.delete_customer(customer.id)
        assert result.success
        assert result.data is None

    def test_mark_overdue(self, engine):
        """mark_overdue_invoices returns the changed invoices."""
        customer = engine.create_customer("Acme Corp").data
        invoice = engine.create_invoice(
            customer.id, ITEMS, issued_at=date(2023, 12, 1), due_date=date(2023, 12, 31)
        ).data
        engine.update_invoice_status(invoice.id, "SENT")

        result = engine.mark_overdue_invoices()
        assert [inv.status for inv in result.data] == [InvoiceStatus.OVERDUE]

    def test_payment_update_and_delete(self, engine):
        """Payment updates and deletes recompute the invoice."""
        customer = engine.create_customer("Acme Corp").data
        invoice = engine.create_invoice(
            customer.id, [{"name": "Work", "quantity": 1, "unit_price": 100000}],
            issued_at=date(2024, 1, 15), due_date=date(2024, 2, 14),
        ).data
        engine.update_invoice_status(invoice.id, "SENT")

        payment = engine.create_payment(invoice.id, 110000).data
        assert engine.get_invoice(invoice.id).data.status == InvoiceStatus.SENT

        engine.update_payment(payment.id, status="RECONCILED")
        assert engine.get_invoice(invoice.id).data.status == InvoiceStatus.PAID
        assert [p.id for p in engine.list_payments(status="RECONCILED").data] == [payment.id]

        assert engine.delete_payment(payment.id).success
        assert engine.get_invoice(invoice.id).data.status == InvoiceStatus.SENT

    def test_failures_are_logged(self, engine, caplog):
        """Validation failures log at INFO, other domain failures at WARNING."""
        caplog.set_level(logging.INFO, logger="billkit")

        engine.create_customer("")
        engine.delete_quote(12345)

        rejected = [r for r in caplog.records if r.getMessage() == "operation_rejected"]
        failed = [r for r in caplog.records if r.getMessage() == "operation_failed"]
        assert rejected[0].levelno == logging.INFO
        assert rejected[0].operation == "create_customer"
        assert failed[0].levelno == logging.WARNING
        assert failed[0].error_kind == "not_found"


def test_to_line_items_missing_field():
    """Mappings without a quantity are rejected with the item position."""
    with pytest.raises(ValidationError, match="Item 2: missing field quantity"):
        to_line_items([{"name": "a", "quantity": 1, "unit_price": 1}, {"name": "b", "unit_price": 1}])
