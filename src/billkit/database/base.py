"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

# Import entities directly to avoid circular import through domain/__init__.py
from billkit.domain.entities import (
    AmountBreakdown,
    Customer,
    DocumentKind,
    Invoice,
    InvoiceStatus,
    LineItemInput,
    Payment,
    PaymentMethod,
    PaymentStatus,
    Quote,
    QuoteStatus,
)


class Database(ABC):
    """Abstract repository interface for billkit.

    Reads that take an ``owner_id`` only return rows belonging to that owner.
    Writes that take only an entity ID assume the caller already verified
    ownership.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Return a context manager grouping writes into one atomic unit.

        Commits when the outermost block exits normally and rolls back on any
        exception. Nested blocks join the enclosing transaction. Uniqueness
        violations surface as ConflictError, connectivity failures as
        TransientIOError.
        """
        pass

    # Sequence operations
    @abstractmethod
    def reserve_sequence(self, scope: str) -> int:
        """Atomically increment the counter for scope and return the new value (starting at 1)."""
        pass

    @abstractmethod
    def current_sequence(self, scope: str) -> Optional[int]:
        """Return the last reserved value for scope, or None if never used."""
        pass

    @abstractmethod
    def document_number_exists(self, kind: DocumentKind, number: str) -> bool:
        """Check whether a quote or invoice number is already taken by any owner."""
        pass

    # Customer operations
    @abstractmethod
    def create_customer(
        self,
        owner_id: str,
        name: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
    ) -> int:
        """Create a customer. Returns customer ID."""
        pass

    @abstractmethod
    def get_customer(self, customer_id: int, owner_id: str) -> Optional[Customer]:
        """Get customer by ID for an owner."""
        pass

    @abstractmethod
    def list_customers(self, owner_id: str, search: Optional[str] = None) -> list[Customer]:
        """List an owner's customers, newest first.

        Args:
            owner_id: Owner identity
            search: Optional substring matched against name, email and phone
        """
        pass

    @abstractmethod
    def update_customer(
        self,
        customer_id: int,
        name: str,
        email: Optional[str],
        phone: Optional[str],
        address: Optional[str],
    ) -> None:
        """Replace customer fields."""
        pass

    @abstractmethod
    def delete_customer(self, customer_id: int) -> None:
        """Delete a customer."""
        pass

    @abstractmethod
    def count_customers(self, owner_id: str) -> int:
        """Count an owner's customers."""
        pass

    @abstractmethod
    def count_customer_documents(self, customer_id: int) -> tuple[int, int]:
        """Return (quote_count, invoice_count) referencing a customer."""
        pass

    # Quote operations
    @abstractmethod
    def create_quote(
        self,
        owner_id: str,
        customer_id: int,
        quote_number: str,
        status: QuoteStatus,
        amounts: AmountBreakdown,
        items: Sequence[LineItemInput],
        issued_at: Optional[date] = None,
        valid_until: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Create a quote with its items. Returns quote ID."""
        pass

    @abstractmethod
    def get_quote(self, quote_id: int, owner_id: str) -> Optional[Quote]:
        """Get quote (with items) by ID for an owner."""
        pass

    @abstractmethod
    def list_quotes(
        self,
        owner_id: str,
        status: Optional[QuoteStatus] = None,
        customer_id: Optional[int] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[Quote]:
        """List an owner's quotes, newest first.

        Args:
            owner_id: Owner identity
            status: Optional status filter
            customer_id: Optional customer filter
            search: Optional substring matched against quote number and customer name
            limit: Optional maximum number of rows
        """
        pass

    @abstractmethod
    def update_quote_status(self, quote_id: int, status: QuoteStatus) -> None:
        """Update quote status."""
        pass

    @abstractmethod
    def delete_quote(self, quote_id: int) -> None:
        """Delete a quote and its items. A converted invoice keeps existing, unlinked."""
        pass

    # Invoice operations
    @abstractmethod
    def create_invoice(
        self,
        owner_id: str,
        customer_id: int,
        invoice_number: str,
        status: InvoiceStatus,
        issued_at: date,
        due_date: date,
        amounts: AmountBreakdown,
        items: Sequence[LineItemInput],
        notes: Optional[str] = None,
        quote_id: Optional[int] = None,
    ) -> int:
        """Create an invoice with its items. Returns invoice ID."""
        pass

    @abstractmethod
    def get_invoice(self, invoice_id: int, owner_id: str) -> Optional[Invoice]:
        """Get invoice (with items) by ID for an owner."""
        pass

    @abstractmethod
    def get_invoice_by_quote(self, quote_id: int) -> Optional[Invoice]:
        """Get the invoice converted from a quote, if any."""
        pass

    @abstractmethod
    def list_invoices(
        self,
        owner_id: str,
        statuses: Optional[Sequence[InvoiceStatus]] = None,
        customer_id: Optional[int] = None,
        search: Optional[str] = None,
        issued_from: Optional[date] = None,
        issued_to: Optional[date] = None,
        due_before: Optional[date] = None,
        order_by_due_date: bool = False,
        limit: Optional[int] = None,
    ) -> list[Invoice]:
        """List an owner's invoices.

        Args:
            owner_id: Owner identity
            statuses: Optional set of statuses to include
            customer_id: Optional customer filter
            search: Optional substring matched against invoice number and customer name
            issued_from: Optional inclusive lower bound on issued_at
            issued_to: Optional inclusive upper bound on issued_at
            due_before: Optional exclusive upper bound on due_date
            order_by_due_date: Order by due date ascending instead of newest first
            limit: Optional maximum number of rows
        """
        pass

    @abstractmethod
    def update_invoice_status(self, invoice_id: int, status: InvoiceStatus) -> None:
        """Update invoice status."""
        pass

    @abstractmethod
    def update_invoice_paid(self, invoice_id: int, status: InvoiceStatus, paid_amount: Decimal) -> None:
        """Update invoice status together with its cached paid amount."""
        pass

    @abstractmethod
    def delete_invoice(self, invoice_id: int) -> None:
        """Delete an invoice, its items and its payments."""
        pass

    # Payment operations
    @abstractmethod
    def create_payment(
        self,
        owner_id: str,
        invoice_id: int,
        amount: Decimal,
        paid_at: date,
        method: PaymentMethod,
        status: PaymentStatus,
        notes: Optional[str] = None,
    ) -> int:
        """Create a payment. Returns payment ID."""
        pass

    @abstractmethod
    def get_payment(self, payment_id: int, owner_id: str) -> Optional[Payment]:
        """Get payment by ID for an owner."""
        pass

    @abstractmethod
    def update_payment(
        self,
        payment_id: int,
        amount: Optional[Decimal] = None,
        paid_at: Optional[date] = None,
        method: Optional[PaymentMethod] = None,
        status: Optional[PaymentStatus] = None,
        notes: Optional[str] = None,
    ) -> None:
        """Update payment fields. None leaves a field unchanged."""
        pass

    @abstractmethod
    def delete_payment(self, payment_id: int) -> None:
        """Delete a payment."""
        pass

    @abstractmethod
    def list_payments(
        self,
        owner_id: str,
        status: Optional[PaymentStatus] = None,
        search: Optional[str] = None,
        invoice_id: Optional[int] = None,
        paid_from: Optional[date] = None,
        paid_to: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> list[Payment]:
        """List an owner's payments, most recent paid_at first.

        Args:
            owner_id: Owner identity
            status: Optional status filter
            search: Optional substring matched against invoice number and customer name
            invoice_id: Optional invoice filter
            paid_from: Optional inclusive lower bound on paid_at
            paid_to: Optional inclusive upper bound on paid_at
            limit: Optional maximum number of rows
        """
        pass

    @abstractmethod
    def sum_reconciled_payments(self, invoice_id: int) -> Decimal:
        """Sum the amounts of an invoice's RECONCILED payments, read fresh from storage."""
        pass
