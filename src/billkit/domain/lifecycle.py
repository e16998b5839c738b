"""Status transition rules for quotes and invoices.

Quote:    DRAFT -> SENT -> ACCEPTED | REJECTED
Invoice:  DRAFT -> SENT -> OVERDUE  (user actions)
          SENT | OVERDUE -> PAID, PAID -> SENT  (reconciliation only)

ACCEPTED and REJECTED quotes are terminal. DRAFT is strictly initial for
both document types.
"""

from typing import Any

from billkit.domain.entities import InvoiceStatus, Quote, QuoteStatus
from billkit.domain.errors import InvalidTransitionError, ValidationError, invalid_transition

QUOTE_TRANSITIONS: dict[QuoteStatus, frozenset[QuoteStatus]] = {
    QuoteStatus.DRAFT: frozenset({QuoteStatus.SENT}),
    QuoteStatus.SENT: frozenset({QuoteStatus.ACCEPTED, QuoteStatus.REJECTED}),
    QuoteStatus.ACCEPTED: frozenset(),
    QuoteStatus.REJECTED: frozenset(),
}

INVOICE_TRANSITIONS: dict[InvoiceStatus, frozenset[InvoiceStatus]] = {
    InvoiceStatus.DRAFT: frozenset({InvoiceStatus.SENT}),
    InvoiceStatus.SENT: frozenset({InvoiceStatus.OVERDUE}),
    InvoiceStatus.OVERDUE: frozenset(),
    InvoiceStatus.PAID: frozenset(),
}

# Edges only the reconciliation engine may take
RECONCILIATION_TRANSITIONS: dict[InvoiceStatus, frozenset[InvoiceStatus]] = {
    InvoiceStatus.DRAFT: frozenset({InvoiceStatus.PAID}),
    InvoiceStatus.SENT: frozenset({InvoiceStatus.PAID}),
    InvoiceStatus.OVERDUE: frozenset({InvoiceStatus.PAID}),
    InvoiceStatus.PAID: frozenset({InvoiceStatus.SENT}),
}


def parse_quote_status(value: Any) -> QuoteStatus:
    """Coerce a string or enum to QuoteStatus.

    Raises:
        ValidationError: If value is not a known quote status
    """
    if isinstance(value, QuoteStatus):
        return value
    try:
        return QuoteStatus(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(s.value for s in QuoteStatus)
        raise ValidationError(f"Unknown quote status '{value}'. Allowed: {allowed}")


def parse_invoice_status(value: Any) -> InvoiceStatus:
    """Coerce a string or enum to InvoiceStatus.

    Raises:
        ValidationError: If value is not a known invoice status
    """
    if isinstance(value, InvoiceStatus):
        return value
    try:
        return InvoiceStatus(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(s.value for s in InvoiceStatus)
        raise ValidationError(f"Unknown invoice status '{value}'. Allowed: {allowed}")


def can_transition_quote(current: QuoteStatus, target: QuoteStatus) -> bool:
    return target in QUOTE_TRANSITIONS[current]


def can_transition_invoice(current: InvoiceStatus, target: InvoiceStatus) -> bool:
    return target in INVOICE_TRANSITIONS[current]


def ensure_quote_transition(current: QuoteStatus, target: QuoteStatus) -> None:
    """Raise InvalidTransitionError unless current -> target is a legal quote edge."""
    if not can_transition_quote(current, target):
        raise InvalidTransitionError(invalid_transition("quote", current.value, target.value))


def ensure_invoice_transition(current: InvoiceStatus, target: InvoiceStatus) -> None:
    """Raise InvalidTransitionError unless current -> target is a legal user edge.

    PAID is never reachable this way; it follows the reconciled payment total.
    """
    if not can_transition_invoice(current, target):
        message = invalid_transition("invoice", current.value, target.value)
        if target == InvoiceStatus.PAID:
            message += " (invoices become PAID when reconciled payments cover the total)"
        raise InvalidTransitionError(message)


def ensure_reconciliation_transition(current: InvoiceStatus, target: InvoiceStatus) -> None:
    """Raise InvalidTransitionError unless the reconciliation engine may take this edge."""
    if target not in RECONCILIATION_TRANSITIONS[current]:
        raise InvalidTransitionError(invalid_transition("invoice", current.value, target.value))


def is_convertible(quote: Quote) -> bool:
    """Return True if the quote's status allows conversion to an invoice."""
    return quote.status == QuoteStatus.ACCEPTED
