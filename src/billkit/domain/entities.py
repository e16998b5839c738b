"""Domain model entities for billkit.

These are pure data classes representing business concepts, independent of
database schema. Services and callers only ever see these records; the ORM
models stay behind the database layer.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class QuoteStatus(str, Enum):
    """Quote lifecycle status."""

    DRAFT = "DRAFT"
    SENT = "SENT"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class InvoiceStatus(str, Enum):
    """Invoice lifecycle status."""

    DRAFT = "DRAFT"
    SENT = "SENT"
    OVERDUE = "OVERDUE"
    PAID = "PAID"


class PaymentMethod(str, Enum):
    """How a payment was made."""

    BANK_TRANSFER = "BANK_TRANSFER"
    CREDIT_CARD = "CREDIT_CARD"
    CASH = "CASH"
    OTHER = "OTHER"


class PaymentStatus(str, Enum):
    """Payment status. Only RECONCILED payments count toward an invoice."""

    RECORDED = "RECORDED"
    RECONCILED = "RECONCILED"
    CANCELLED = "CANCELLED"


class DocumentKind(str, Enum):
    """Kinds of numbered documents."""

    QUOTE = "QUOTE"
    INVOICE = "INVOICE"


@dataclass(frozen=True)
class Customer:
    """Customer domain entity."""

    id: int
    owner_id: str
    name: str
    email: Optional[str]
    phone: Optional[str]
    address: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class LineItemInput:
    """Line item as supplied by a caller, before amounts are derived."""

    name: str
    quantity: Decimal
    unit_price: Decimal
    description: Optional[str] = None


@dataclass(frozen=True)
class QuoteItem:
    """Quote line item domain entity."""

    id: int
    quote_id: int
    position: int
    name: str
    description: Optional[str]
    quantity: Decimal
    unit_price: Decimal
    amount: Decimal


@dataclass(frozen=True)
class InvoiceItem:
    """Invoice line item domain entity."""

    id: int
    invoice_id: int
    position: int
    name: str
    description: Optional[str]
    quantity: Decimal
    unit_price: Decimal
    amount: Decimal


@dataclass(frozen=True)
class Quote:
    """Quote domain entity."""

    id: int
    owner_id: str
    customer_id: int
    quote_number: str
    status: QuoteStatus
    issued_at: Optional[date]
    valid_until: Optional[date]
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    notes: Optional[str]
    created_at: datetime
    items: tuple[QuoteItem, ...] = ()
    customer_name: Optional[str] = None


@dataclass(frozen=True)
class Invoice:
    """Invoice domain entity."""

    id: int
    owner_id: str
    customer_id: int
    quote_id: Optional[int]
    invoice_number: str
    status: InvoiceStatus
    issued_at: date
    due_date: date
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    paid_amount: Decimal
    notes: Optional[str]
    created_at: datetime
    items: tuple[InvoiceItem, ...] = ()
    customer_name: Optional[str] = None


@dataclass(frozen=True)
class Payment:
    """Payment domain entity."""

    id: int
    owner_id: str
    invoice_id: int
    amount: Decimal
    paid_at: date
    method: PaymentMethod
    status: PaymentStatus
    notes: Optional[str]
    created_at: datetime
    invoice_number: Optional[str] = None
    customer_name: Optional[str] = None


@dataclass(frozen=True)
class AmountBreakdown:
    """Derived document amounts."""

    subtotal: Decimal
    tax: Decimal
    total: Decimal


@dataclass(frozen=True)
class InvoiceBalance:
    """Reconciled total and outstanding remainder for one invoice."""

    invoice: Invoice
    total_paid: Decimal
    remaining: Decimal


@dataclass(frozen=True)
class DashboardKPI:
    """Headline figures for one owner."""

    monthly_sales: Decimal
    monthly_payments: Decimal
    total_unpaid: Decimal
    customer_count: int
    status_counts: dict[str, int]
    overdue_invoices: list[Invoice] = field(default_factory=list)
    recent_quotes: list[Quote] = field(default_factory=list)
    recent_invoices: list[Invoice] = field(default_factory=list)
    recent_payments: list[Payment] = field(default_factory=list)
