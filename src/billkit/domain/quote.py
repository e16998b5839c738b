"""Quote domain service."""

from datetime import date
from typing import Any, Optional, Sequence

from billkit.config import Settings
from billkit.database.base import Database
from billkit.domain.amounts import AmountCalculator
from billkit.domain.clock import Clock, SystemClock
from billkit.domain.entities import DocumentKind, LineItemInput, Quote as QuoteEntity, QuoteStatus
from billkit.domain.errors import (
    NotFoundError,
    ValidationError,
    customer_not_found,
    quote_not_found,
    require_owner,
)
from billkit.domain.lifecycle import ensure_quote_transition, parse_quote_status
from billkit.domain.numbering import NumberAllocator
from billkit.logging_config import get_logger

logger = get_logger("domain.quote")

MAX_NOTES_LENGTH = 1000


def validate_notes(notes: Optional[str]) -> Optional[str]:
    """Trim notes, turning blank into None.

    Raises:
        ValidationError: If notes are too long
    """
    if notes is None:
        return None
    notes = notes.strip()
    if len(notes) > MAX_NOTES_LENGTH:
        raise ValidationError(f"Notes must be at most {MAX_NOTES_LENGTH} characters")
    return notes or None


class QuoteService:
    """Service for creating quotes and moving them through their lifecycle."""

    def __init__(
        self,
        db: Database,
        owner_id: str,
        settings: Optional[Settings] = None,
        clock: Optional[Clock] = None,
    ):
        """Initialize quote service.

        Args:
            db: Database instance
            owner_id: Owner identity
            settings: Engine settings (defaults apply when None)
            clock: Clock used for numbering dates (system clock when None)
        """
        self.db = db
        self.owner_id = require_owner(owner_id)
        self.settings = settings or Settings()
        self.clock = clock or SystemClock()
        self.calculator = AmountCalculator(self.settings.tax_rate)
        self.allocator = NumberAllocator(db, self.settings.quote_number_scope)

    def create_quote(
        self,
        customer_id: int,
        items: Sequence[LineItemInput],
        issued_at: Optional[date] = None,
        valid_until: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> QuoteEntity:
        """Create a DRAFT quote with derived amounts and a new quote number.

        Args:
            customer_id: Customer the quote is addressed to
            items: Line items (at least one)
            issued_at: Optional issue date
            valid_until: Optional expiry date
            notes: Optional notes

        Returns:
            The created quote

        Raises:
            ValidationError: If items or notes are invalid
            NotFoundError: If the customer doesn't exist for this owner
            ConflictError: If the allocated number collides with a concurrent insert
        """
        normalized, amounts = self.calculator.compute_validated(items)
        notes = validate_notes(notes)

        with self.db.transaction():
            if self.db.get_customer(customer_id, self.owner_id) is None:
                raise NotFoundError(customer_not_found(customer_id))

            quote_number = self.allocator.allocate(DocumentKind.QUOTE, self.owner_id, self.clock.today())
            quote_id = self.db.create_quote(
                owner_id=self.owner_id,
                customer_id=customer_id,
                quote_number=quote_number,
                status=QuoteStatus.DRAFT,
                amounts=amounts,
                items=normalized,
                issued_at=issued_at,
                valid_until=valid_until,
                notes=notes,
            )
            logger.info(
                "quote_created",
                extra={"quote_id": quote_id, "quote_number": quote_number, "total": amounts.total},
            )
            return self.require_quote(quote_id)

    def get_quote(self, quote_id: int) -> Optional[QuoteEntity]:
        """Get quote by ID, or None if absent or owned by someone else."""
        return self.db.get_quote(quote_id, self.owner_id)

    def require_quote(self, quote_id: int) -> QuoteEntity:
        """Get quote by ID.

        Raises:
            NotFoundError: If the quote doesn't exist for this owner
        """
        quote = self.db.get_quote(quote_id, self.owner_id)
        if quote is None:
            raise NotFoundError(quote_not_found(quote_id))
        return quote

    def list_quotes(
        self,
        status: Optional[Any] = None,
        customer_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> list[QuoteEntity]:
        """List quotes, newest first.

        Args:
            status: Optional status (enum or name)
            customer_id: Optional customer filter
            search: Optional quote number or customer name substring

        Raises:
            ValidationError: If status is not a quote status
        """
        parsed_status = parse_quote_status(status) if status else None
        return self.db.list_quotes(
            self.owner_id, status=parsed_status, customer_id=customer_id, search=search or None
        )

    def update_quote_status(self, quote_id: int, status: Any) -> QuoteEntity:
        """Move a quote to a new status.

        Raises:
            ValidationError: If status is not a quote status
            NotFoundError: If the quote doesn't exist for this owner
            InvalidTransitionError: If the change is not allowed from the current status
        """
        target = parse_quote_status(status)
        with self.db.transaction():
            quote = self.require_quote(quote_id)
            ensure_quote_transition(quote.status, target)
            self.db.update_quote_status(quote_id, target)
            logger.info(
                "quote_status_changed",
                extra={"quote_id": quote_id, "old_status": quote.status.value, "new_status": target.value},
            )
            return self.require_quote(quote_id)

    def send_quote(self, quote_id: int) -> QuoteEntity:
        """DRAFT -> SENT."""
        return self.update_quote_status(quote_id, QuoteStatus.SENT)

    def accept_quote(self, quote_id: int) -> QuoteEntity:
        """SENT -> ACCEPTED."""
        return self.update_quote_status(quote_id, QuoteStatus.ACCEPTED)

    def reject_quote(self, quote_id: int) -> QuoteEntity:
        """SENT -> REJECTED."""
        return self.update_quote_status(quote_id, QuoteStatus.REJECTED)

    def delete_quote(self, quote_id: int) -> None:
        """Delete a quote and its items.

        An invoice converted from the quote is kept and loses its link.

        Raises:
            NotFoundError: If the quote doesn't exist for this owner
        """
        with self.db.transaction():
            self.require_quote(quote_id)
            self.db.delete_quote(quote_id)
            logger.info("quote_deleted", extra={"quote_id": quote_id})
