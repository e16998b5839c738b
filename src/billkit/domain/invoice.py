"""Invoice domain service."""

from datetime import date, timedelta
from typing import Any, Optional, Sequence

from billkit.config import Settings
from billkit.database.base import Database
from billkit.domain.amounts import AmountCalculator
from billkit.domain.clock import Clock, SystemClock
from billkit.domain.entities import (
    AmountBreakdown,
    DocumentKind,
    Invoice as InvoiceEntity,
    InvoiceStatus,
    LineItemInput,
)
from billkit.domain.errors import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
    customer_not_found,
    invoice_not_found,
    quote_already_converted,
    quote_not_accepted,
    quote_not_found,
    require_owner,
)
from billkit.domain.lifecycle import (
    ensure_invoice_transition,
    is_convertible,
    parse_invoice_status,
)
from billkit.domain.numbering import NumberAllocator
from billkit.domain.quote import validate_notes
from billkit.logging_config import get_logger

logger = get_logger("domain.invoice")


class InvoiceService:
    """Service for creating invoices, converting quotes and changing invoice status."""

    def __init__(
        self,
        db: Database,
        owner_id: str,
        settings: Optional[Settings] = None,
        clock: Optional[Clock] = None,
    ):
        """Initialize invoice service.

        Args:
            db: Database instance
            owner_id: Owner identity
            settings: Engine settings (defaults apply when None)
            clock: Clock used for issue dates and numbering (system clock when None)
        """
        self.db = db
        self.owner_id = require_owner(owner_id)
        self.settings = settings or Settings()
        self.clock = clock or SystemClock()
        self.calculator = AmountCalculator(self.settings.tax_rate)
        self.allocator = NumberAllocator(db, self.settings.quote_number_scope)

    def create_invoice(
        self,
        customer_id: int,
        items: Sequence[LineItemInput],
        issued_at: date,
        due_date: date,
        notes: Optional[str] = None,
    ) -> InvoiceEntity:
        """Create a DRAFT invoice directly, without a quote.

        Args:
            customer_id: Customer being billed
            items: Line items (at least one)
            issued_at: Issue date
            due_date: Payment due date (not before issued_at)
            notes: Optional notes

        Returns:
            The created invoice

        Raises:
            ValidationError: If items, dates or notes are invalid
            NotFoundError: If the customer doesn't exist for this owner
            ConflictError: If the allocated number collides with a concurrent insert
        """
        if issued_at is None:
            raise ValidationError("Issue date is required")
        if due_date is None:
            raise ValidationError("Due date is required")
        if due_date < issued_at:
            raise ValidationError("Due date cannot be before the issue date")
        normalized, amounts = self.calculator.compute_validated(items)
        notes = validate_notes(notes)

        with self.db.transaction():
            if self.db.get_customer(customer_id, self.owner_id) is None:
                raise NotFoundError(customer_not_found(customer_id))

            invoice_number = self.allocator.allocate(
                DocumentKind.INVOICE, self.owner_id, self.clock.today()
            )
            invoice_id = self.db.create_invoice(
                owner_id=self.owner_id,
                customer_id=customer_id,
                invoice_number=invoice_number,
                status=InvoiceStatus.DRAFT,
                issued_at=issued_at,
                due_date=due_date,
                amounts=amounts,
                items=normalized,
                notes=notes,
            )
            logger.info(
                "invoice_created",
                extra={"invoice_id": invoice_id, "invoice_number": invoice_number, "total": amounts.total},
            )
            return self.require_invoice(invoice_id)

    def convert_quote_to_invoice(self, quote_id: int) -> InvoiceEntity:
        """Create a DRAFT invoice from an ACCEPTED quote.

        Amounts, notes and items are copied verbatim from the quote. The
        invoice is issued today and due after the configured payment terms.

        Args:
            quote_id: Quote to convert

        Returns:
            The new invoice

        Raises:
            NotFoundError: If the quote doesn't exist for this owner
            InvalidStateError: If the quote is not ACCEPTED
            ConflictError: If the quote was already converted
        """
        with self.db.transaction():
            quote = self.db.get_quote(quote_id, self.owner_id)
            if quote is None:
                raise NotFoundError(quote_not_found(quote_id))
            if not is_convertible(quote):
                raise InvalidStateError(quote_not_accepted(quote_id, quote.status.value))
            if self.db.get_invoice_by_quote(quote_id) is not None:
                raise ConflictError(quote_already_converted(quote_id))

            issued_at = self.clock.today()
            due_date = issued_at + timedelta(days=self.settings.payment_terms_days)
            invoice_number = self.allocator.allocate(DocumentKind.INVOICE, self.owner_id, issued_at)

            invoice_id = self.db.create_invoice(
                owner_id=self.owner_id,
                customer_id=quote.customer_id,
                invoice_number=invoice_number,
                status=InvoiceStatus.DRAFT,
                issued_at=issued_at,
                due_date=due_date,
                amounts=AmountBreakdown(subtotal=quote.subtotal, tax=quote.tax, total=quote.total),
                items=[
                    LineItemInput(
                        name=item.name,
                        quantity=item.quantity,
                        unit_price=item.unit_price,
                        description=item.description,
                    )
                    for item in quote.items
                ],
                notes=quote.notes,
                quote_id=quote.id,
            )
            logger.info(
                "quote_converted",
                extra={"quote_id": quote_id, "invoice_id": invoice_id, "invoice_number": invoice_number},
            )
            return self.require_invoice(invoice_id)

    def get_invoice(self, invoice_id: int) -> Optional[InvoiceEntity]:
        """Get invoice by ID, or None if absent or owned by someone else."""
        return self.db.get_invoice(invoice_id, self.owner_id)

    def require_invoice(self, invoice_id: int) -> InvoiceEntity:
        """Get invoice by ID.

        Raises:
            NotFoundError: If the invoice doesn't exist for this owner
        """
        invoice = self.db.get_invoice(invoice_id, self.owner_id)
        if invoice is None:
            raise NotFoundError(invoice_not_found(invoice_id))
        return invoice

    def list_invoices(
        self,
        status: Optional[Any] = None,
        customer_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> list[InvoiceEntity]:
        """List invoices, newest first.

        Raises:
            ValidationError: If status is not an invoice status
        """
        statuses = [parse_invoice_status(status)] if status else None
        return self.db.list_invoices(
            self.owner_id, statuses=statuses, customer_id=customer_id, search=search or None
        )

    def update_invoice_status(self, invoice_id: int, status: Any) -> InvoiceEntity:
        """Move an invoice to a new status by user action.

        Only DRAFT -> SENT and SENT -> OVERDUE are user actions; PAID follows
        the reconciled payment total.

        Raises:
            ValidationError: If status is not an invoice status
            NotFoundError: If the invoice doesn't exist for this owner
            InvalidTransitionError: If the change is not allowed
        """
        target = parse_invoice_status(status)
        with self.db.transaction():
            invoice = self.require_invoice(invoice_id)
            ensure_invoice_transition(invoice.status, target)
            self.db.update_invoice_status(invoice_id, target)
            logger.info(
                "invoice_status_changed",
                extra={"invoice_id": invoice_id, "old_status": invoice.status.value, "new_status": target.value},
            )
            return self.require_invoice(invoice_id)

    def mark_sent(self, invoice_id: int) -> InvoiceEntity:
        """DRAFT -> SENT."""
        return self.update_invoice_status(invoice_id, InvoiceStatus.SENT)

    def mark_overdue(self, invoice_id: int) -> InvoiceEntity:
        """SENT -> OVERDUE."""
        return self.update_invoice_status(invoice_id, InvoiceStatus.OVERDUE)

    def mark_overdue_invoices(self, today: Optional[date] = None) -> list[InvoiceEntity]:
        """Move every SENT invoice whose due date has passed to OVERDUE.

        Args:
            today: Reference date (clock date when None)

        Returns:
            The invoices that changed, in due date order
        """
        today = today or self.clock.today()
        with self.db.transaction():
            past_due = self.db.list_invoices(
                self.owner_id,
                statuses=[InvoiceStatus.SENT],
                due_before=today,
                order_by_due_date=True,
            )
            for invoice in past_due:
                ensure_invoice_transition(invoice.status, InvoiceStatus.OVERDUE)
                self.db.update_invoice_status(invoice.id, InvoiceStatus.OVERDUE)
            if past_due:
                logger.info(
                    "invoices_marked_overdue",
                    extra={"count": len(past_due), "invoice_ids": [inv.id for inv in past_due]},
                )
            return [self.require_invoice(inv.id) for inv in past_due]

    def delete_invoice(self, invoice_id: int) -> None:
        """Delete an invoice with its items and payments.

        Raises:
            NotFoundError: If the invoice doesn't exist for this owner
        """
        with self.db.transaction():
            self.require_invoice(invoice_id)
            self.db.delete_invoice(invoice_id)
            logger.info("invoice_deleted", extra={"invoice_id": invoice_id})
