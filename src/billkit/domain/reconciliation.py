"""Invoice status reconciliation against recorded payments.

An invoice is PAID exactly when the sum of its RECONCILED payments reaches
its total. When the sum drops below the total again, a PAID invoice goes
back to SENT; SENT and OVERDUE invoices keep their status. The sum is
always recomputed from storage, never adjusted incrementally.
"""

from decimal import Decimal
from typing import Optional

from billkit.database.base import Database
from billkit.domain.entities import Invoice, InvoiceStatus
from billkit.domain.errors import NotFoundError, invoice_not_found, require_owner
from billkit.domain.lifecycle import ensure_reconciliation_transition
from billkit.logging_config import get_logger

logger = get_logger("domain.reconciliation")


def reconciled_status(
    current: InvoiceStatus, total: Decimal, total_reconciled: Decimal
) -> InvoiceStatus:
    """Return the status an invoice should have for a reconciled payment sum.

    Args:
        current: Invoice status before recomputation
        total: Invoice total
        total_reconciled: Sum of RECONCILED payment amounts

    Returns:
        PAID if total_reconciled covers total, SENT if a PAID invoice is no
        longer covered, otherwise current
    """
    if total_reconciled >= total:
        return InvoiceStatus.PAID
    if current == InvoiceStatus.PAID:
        return InvoiceStatus.SENT
    return current


class ReconciliationService:
    """Keeps invoice status consistent with reconciled payments."""

    def __init__(self, db: Database, owner_id: str):
        """Initialize reconciliation service.

        Args:
            db: Database instance
            owner_id: Owner identity all lookups are scoped to
        """
        self.db = db
        self.owner_id = require_owner(owner_id)

    def recompute_invoice_status(self, invoice_id: int) -> Invoice:
        """Recompute an invoice's status and cached paid amount.

        Runs inside the caller's transaction when there is one, so the
        payment write and the status change commit together.

        Args:
            invoice_id: Invoice ID

        Returns:
            The updated invoice

        Raises:
            NotFoundError: If the invoice doesn't exist for this owner
        """
        with self.db.transaction():
            invoice = self._load_invoice(invoice_id)
            total_reconciled = self.db.sum_reconciled_payments(invoice_id)
            new_status = reconciled_status(invoice.status, invoice.total, total_reconciled)

            if new_status != invoice.status:
                ensure_reconciliation_transition(invoice.status, new_status)

            if new_status != invoice.status or total_reconciled != invoice.paid_amount:
                self.db.update_invoice_paid(invoice_id, new_status, total_reconciled)

            logger.info(
                "invoice_status_recomputed",
                extra={
                    "invoice_id": invoice_id,
                    "total": invoice.total,
                    "total_reconciled": total_reconciled,
                    "old_status": invoice.status.value,
                    "new_status": new_status.value,
                },
            )
            return self._load_invoice(invoice_id)

    def _load_invoice(self, invoice_id: int) -> Invoice:
        invoice: Optional[Invoice] = self.db.get_invoice(invoice_id, self.owner_id)
        if invoice is None:
            raise NotFoundError(invoice_not_found(invoice_id))
        return invoice
