"""Tests for quote and invoice status transitions."""

import pytest

from billkit.domain.entities import InvoiceStatus, QuoteStatus
from billkit.domain.errors import InvalidTransitionError, ValidationError
from billkit.domain.lifecycle import (
    can_transition_invoice,
    can_transition_quote,
    ensure_invoice_transition,
    ensure_quote_transition,
    ensure_reconciliation_transition,
    parse_invoice_status,
    parse_quote_status,
)


@pytest.mark.parametrize(
    "current,target",
    [
        (QuoteStatus.DRAFT, QuoteStatus.SENT),
        (QuoteStatus.SENT, QuoteStatus.ACCEPTED),
        (QuoteStatus.SENT, QuoteStatus.REJECTED),
    ],
)
def test_allowed_quote_transitions(current, target):
    """The three legal quote edges."""
    assert can_transition_quote(current, target)
    ensure_quote_transition(current, target)


@pytest.mark.parametrize(
    "current,target",
    [
        (QuoteStatus.DRAFT, QuoteStatus.ACCEPTED),
        (QuoteStatus.DRAFT, QuoteStatus.REJECTED),
        (QuoteStatus.SENT, QuoteStatus.DRAFT),
        (QuoteStatus.ACCEPTED, QuoteStatus.SENT),
        (QuoteStatus.ACCEPTED, QuoteStatus.REJECTED),
        (QuoteStatus.REJECTED, QuoteStatus.ACCEPTED),
        (QuoteStatus.DRAFT, QuoteStatus.DRAFT),
    ],
)
def test_rejected_quote_transitions(current, target):
    """Everything else is refused; ACCEPTED and REJECTED are terminal."""
    assert not can_transition_quote(current, target)
    with pytest.raises(InvalidTransitionError, match="Cannot change quote status"):
        ensure_quote_transition(current, target)


def test_allowed_invoice_user_transitions():
    """Users may send a draft and mark a sent invoice overdue."""
    assert can_transition_invoice(InvoiceStatus.DRAFT, InvoiceStatus.SENT)
    assert can_transition_invoice(InvoiceStatus.SENT, InvoiceStatus.OVERDUE)


@pytest.mark.parametrize("current", list(InvoiceStatus))
def test_paid_is_never_a_user_transition(current):
    """PAID only follows reconciled payments."""
    with pytest.raises(InvalidTransitionError, match="reconciled payments"):
        ensure_invoice_transition(current, InvoiceStatus.PAID)


@pytest.mark.parametrize(
    "current,target",
    [
        (InvoiceStatus.SENT, InvoiceStatus.DRAFT),
        (InvoiceStatus.OVERDUE, InvoiceStatus.SENT),
        (InvoiceStatus.PAID, InvoiceStatus.SENT),
        (InvoiceStatus.DRAFT, InvoiceStatus.OVERDUE),
    ],
)
def test_rejected_invoice_transitions(current, target):
    """DRAFT is strictly initial and PAID is left only by reconciliation."""
    with pytest.raises(InvalidTransitionError):
        ensure_invoice_transition(current, target)


def test_reconciliation_edges():
    """Reconciliation may settle any unpaid invoice and revert PAID to SENT."""
    for current in (InvoiceStatus.DRAFT, InvoiceStatus.SENT, InvoiceStatus.OVERDUE):
        ensure_reconciliation_transition(current, InvoiceStatus.PAID)
    ensure_reconciliation_transition(InvoiceStatus.PAID, InvoiceStatus.SENT)

    with pytest.raises(InvalidTransitionError):
        ensure_reconciliation_transition(InvoiceStatus.PAID, InvoiceStatus.OVERDUE)


def test_parse_statuses():
    """Status names are case-insensitive; unknown names are validation errors."""
    assert parse_quote_status("accepted") == QuoteStatus.ACCEPTED
    assert parse_quote_status(QuoteStatus.SENT) == QuoteStatus.SENT
    assert parse_invoice_status(" overdue ") == InvoiceStatus.OVERDUE

    with pytest.raises(ValidationError, match="Unknown quote status"):
        parse_quote_status("ISSUED")
    with pytest.raises(ValidationError, match="Unknown invoice status"):
        parse_invoice_status("CANCELLED")
