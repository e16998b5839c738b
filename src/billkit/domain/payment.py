"""Payment domain service.

Every payment write is followed by an invoice status recomputation in the
same transaction.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Optional

from billkit.database.base import Database
from billkit.domain.amounts import MONEY_PLACES, require_places, to_decimal
from billkit.domain.clock import Clock, SystemClock
from billkit.domain.entities import (
    InvoiceBalance,
    Payment as PaymentEntity,
    PaymentMethod,
    PaymentStatus,
)
from billkit.domain.errors import (
    NotFoundError,
    ValidationError,
    invoice_not_found,
    payment_not_found,
    require_owner,
)
from billkit.domain.reconciliation import ReconciliationService
from billkit.logging_config import get_logger

logger = get_logger("domain.payment")

MAX_NOTES_LENGTH = 1000


def parse_payment_method(value: Any) -> PaymentMethod:
    """Coerce a string or enum to PaymentMethod.

    Raises:
        ValidationError: If value is not a known method
    """
    if isinstance(value, PaymentMethod):
        return value
    try:
        return PaymentMethod(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(m.value for m in PaymentMethod)
        raise ValidationError(f"Unknown payment method '{value}'. Allowed: {allowed}")


def parse_payment_status(value: Any) -> PaymentStatus:
    """Coerce a string or enum to PaymentStatus.

    Raises:
        ValidationError: If value is not a known status
    """
    if isinstance(value, PaymentStatus):
        return value
    try:
        return PaymentStatus(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(s.value for s in PaymentStatus)
        raise ValidationError(f"Unknown payment status '{value}'. Allowed: {allowed}")


def validate_payment_amount(amount: Any) -> Decimal:
    """Return amount as Decimal.

    Raises:
        ValidationError: If amount is not a number greater than 0
            or has more than two decimal places
    """
    value = to_decimal(amount, "Payment amount")
    if value <= 0:
        raise ValidationError("Payment amount must be greater than 0")
    return require_places(value, MONEY_PLACES, "Payment amount")


def _validate_notes(notes: Optional[str]) -> Optional[str]:
    if notes is None:
        return None
    notes = notes.strip()
    if len(notes) > MAX_NOTES_LENGTH:
        raise ValidationError(f"Notes must be at most {MAX_NOTES_LENGTH} characters")
    return notes or None


class PaymentService:
    """Service for recording payments against invoices."""

    def __init__(self, db: Database, owner_id: str, clock: Optional[Clock] = None):
        """Initialize payment service.

        Args:
            db: Database instance
            owner_id: Owner identity
            clock: Clock used for the default payment date (system clock when None)
        """
        self.db = db
        self.owner_id = require_owner(owner_id)
        self.clock = clock or SystemClock()
        self.reconciliation = ReconciliationService(db, owner_id)

    def create_payment(
        self,
        invoice_id: int,
        amount: Any,
        paid_at: Optional[date] = None,
        method: Any = PaymentMethod.BANK_TRANSFER,
        status: Any = PaymentStatus.RECORDED,
        notes: Optional[str] = None,
    ) -> PaymentEntity:
        """Record a payment and recompute the invoice status.

        Args:
            invoice_id: Invoice being paid
            amount: Amount (> 0)
            paid_at: Payment date (clock date when None)
            method: Payment method (enum or name)
            status: Payment status (enum or name)
            notes: Optional notes

        Returns:
            The created payment

        Raises:
            ValidationError: If amount, method, status or notes are invalid
            NotFoundError: If the invoice doesn't exist for this owner
        """
        amount = validate_payment_amount(amount)
        method = parse_payment_method(method)
        status = parse_payment_status(status)
        notes = _validate_notes(notes)
        paid_at = paid_at or self.clock.today()

        with self.db.transaction():
            if self.db.get_invoice(invoice_id, self.owner_id) is None:
                raise NotFoundError(invoice_not_found(invoice_id))

            payment_id = self.db.create_payment(
                owner_id=self.owner_id,
                invoice_id=invoice_id,
                amount=amount,
                paid_at=paid_at,
                method=method,
                status=status,
                notes=notes,
            )
            logger.info(
                "payment_created",
                extra={"payment_id": payment_id, "invoice_id": invoice_id, "amount": amount, "status": status.value},
            )
            self.reconciliation.recompute_invoice_status(invoice_id)
            return self.require_payment(payment_id)

    def get_payment(self, payment_id: int) -> Optional[PaymentEntity]:
        """Get payment by ID, or None if absent or owned by someone else."""
        return self.db.get_payment(payment_id, self.owner_id)

    def require_payment(self, payment_id: int) -> PaymentEntity:
        """Get payment by ID.

        Raises:
            NotFoundError: If the payment doesn't exist for this owner
        """
        payment = self.db.get_payment(payment_id, self.owner_id)
        if payment is None:
            raise NotFoundError(payment_not_found(payment_id))
        return payment

    def update_payment(
        self,
        payment_id: int,
        amount: Any = None,
        paid_at: Optional[date] = None,
        method: Any = None,
        status: Any = None,
        notes: Optional[str] = None,
    ) -> PaymentEntity:
        """Update payment fields and recompute the invoice status.

        None leaves a field unchanged. The invoice is recomputed after every
        update, whichever fields changed.

        Raises:
            ValidationError: If a supplied field is invalid
            NotFoundError: If the payment doesn't exist for this owner
        """
        new_amount = validate_payment_amount(amount) if amount is not None else None
        new_method = parse_payment_method(method) if method is not None else None
        new_status = parse_payment_status(status) if status is not None else None
        notes = _validate_notes(notes)

        with self.db.transaction():
            existing = self.require_payment(payment_id)
            self.db.update_payment(
                payment_id,
                amount=new_amount,
                paid_at=paid_at,
                method=new_method,
                status=new_status,
                notes=notes,
            )
            logger.info(
                "payment_updated",
                extra={
                    "payment_id": payment_id,
                    "invoice_id": existing.invoice_id,
                    "amount": new_amount if new_amount is not None else existing.amount,
                    "status": (new_status or existing.status).value,
                },
            )
            self.reconciliation.recompute_invoice_status(existing.invoice_id)
            return self.require_payment(payment_id)

    def delete_payment(self, payment_id: int) -> None:
        """Delete a payment and recompute the invoice status from the remaining payments.

        Raises:
            NotFoundError: If the payment doesn't exist for this owner
        """
        with self.db.transaction():
            existing = self.require_payment(payment_id)
            self.db.delete_payment(payment_id)
            logger.info(
                "payment_deleted",
                extra={"payment_id": payment_id, "invoice_id": existing.invoice_id},
            )
            self.reconciliation.recompute_invoice_status(existing.invoice_id)

    def list_payments(
        self,
        status: Optional[Any] = None,
        search: Optional[str] = None,
        invoice_id: Optional[int] = None,
    ) -> list[PaymentEntity]:
        """List payments, most recent first.

        Args:
            status: Optional status (enum or name)
            search: Optional invoice number or customer name substring
            invoice_id: Optional invoice filter

        Raises:
            ValidationError: If status is not a payment status
        """
        parsed_status = parse_payment_status(status) if status else None
        return self.db.list_payments(
            self.owner_id, status=parsed_status, search=search or None, invoice_id=invoice_id
        )

    def get_invoice_balance(self, invoice_id: int) -> InvoiceBalance:
        """Return an invoice with its reconciled total and outstanding remainder.

        Raises:
            NotFoundError: If the invoice doesn't exist for this owner
        """
        invoice = self.db.get_invoice(invoice_id, self.owner_id)
        if invoice is None:
            raise NotFoundError(invoice_not_found(invoice_id))
        total_paid = self.db.sum_reconciled_payments(invoice_id)
        return InvoiceBalance(invoice=invoice, total_paid=total_paid, remaining=invoice.total - total_paid)
