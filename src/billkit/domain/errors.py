"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """

    kind = "domain"


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""

    kind = "validation"


class NotFoundError(DomainError):
    """Requested entity does not exist or belongs to another owner."""

    kind = "not_found"


class InvalidTransitionError(DomainError):
    """Requested status change is not allowed from the current status."""

    kind = "invalid_transition"


class InvalidStateError(InvalidTransitionError):
    """Operation requires the document to be in a different status."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""

    kind = "conflict"


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""

    kind = "dependency"


class TransientIOError(DomainError):
    """Persistence layer unavailable; the caller may retry."""

    kind = "transient_io"


class OwnerContextError(RuntimeError):
    """Service was called without a usable owner identity."""


def require_owner(owner_id: object) -> str:
    """Return owner_id if it is a non-empty string, else raise OwnerContextError."""
    if not isinstance(owner_id, str) or not owner_id.strip():
        raise OwnerContextError(f"Invalid owner identity: {owner_id!r}")
    return owner_id


def customer_not_found(customer_id: int) -> str:
    """Return message for missing customer."""
    return f"Customer {customer_id} not found"


def quote_not_found(quote_id: int) -> str:
    """Return message for missing quote."""
    return f"Quote {quote_id} not found"


def invoice_not_found(invoice_id: int) -> str:
    """Return message for missing invoice."""
    return f"Invoice {invoice_id} not found"


def payment_not_found(payment_id: int) -> str:
    """Return message for missing payment."""
    return f"Payment {payment_id} not found"


def invalid_transition(document: str, current: str, target: str) -> str:
    """Return message for a rejected status change."""
    return f"Cannot change {document} status from {current} to {target}"


def quote_not_accepted(quote_id: int, status: str) -> str:
    """Return message when converting a quote that is not accepted."""
    return f"Only accepted quotes can be converted to invoices (quote {quote_id} is {status})"


def quote_already_converted(quote_id: int) -> str:
    """Return message for a second conversion of the same quote."""
    return f"Quote {quote_id} has already been converted to an invoice"


def customer_delete_blocked(customer_id: int, quote_count: int, invoice_count: int) -> str:
    """Return message when a customer still has documents."""
    parts = []
    if quote_count > 0:
        parts.append(f"{quote_count} quote{'s' if quote_count != 1 else ''}")
    if invoice_count > 0:
        parts.append(f"{invoice_count} invoice{'s' if invoice_count != 1 else ''}")
    return (
        f"Cannot delete customer {customer_id}: it has {', '.join(parts)}. "
        "Please delete them first."
    )
