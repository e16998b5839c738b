"""Document number allocation.

Invoice numbers look like ``INV-20240115-001``: a per-owner, per-day counter.
Quote numbers look like ``QT-2024-0001``: a per-year counter shared by all
owners unless the settings scope it per owner.

Counters live in the ``document_sequences`` table and are incremented
atomically inside the caller's transaction, so two creators never read the
same count. Numbers are unique across all owners, so a candidate that is
already taken (another owner's invoice on the same day, or a row written
before the counter existed) is skipped.
"""

from datetime import date

from billkit.config import QUOTE_SCOPE_OWNER, QUOTE_SCOPE_GLOBAL
from billkit.database.base import Database
from billkit.domain.entities import DocumentKind
from billkit.domain.errors import OwnerContextError
from billkit.logging_config import get_logger

logger = get_logger("domain.numbering")

INVOICE_PREFIX = "INV"
QUOTE_PREFIX = "QT"

# Upper bound on skipped candidates before giving up
MAX_SKIPS = 1000


def format_invoice_number(when: date, seq: int) -> str:
    """Return INV-{YYYYMMDD}-{seq:03d}."""
    return f"{INVOICE_PREFIX}-{when.strftime('%Y%m%d')}-{seq:03d}"


def format_quote_number(when: date, seq: int) -> str:
    """Return QT-{YYYY}-{seq:04d}."""
    return f"{QUOTE_PREFIX}-{when.year:04d}-{seq:04d}"


class NumberAllocator:
    """Allocates quote and invoice numbers."""

    def __init__(self, db: Database, quote_number_scope: str = QUOTE_SCOPE_GLOBAL):
        """Initialize number allocator.

        Args:
            db: Database instance
            quote_number_scope: "global" or "owner"
        """
        self.db = db
        self.quote_number_scope = quote_number_scope

    def scope_for(self, kind: DocumentKind, owner_id: str, when: date) -> str:
        """Return the counter key for a document kind, owner and date."""
        if kind == DocumentKind.INVOICE:
            return f"{INVOICE_PREFIX}:{owner_id}:{when.strftime('%Y%m%d')}"
        if self.quote_number_scope == QUOTE_SCOPE_OWNER:
            return f"{QUOTE_PREFIX}:{owner_id}:{when.year:04d}"
        return f"{QUOTE_PREFIX}:{when.year:04d}"

    def allocate(self, kind: DocumentKind, owner_id: str, when: date) -> str:
        """Reserve the next free document number.

        Must run inside ``db.transaction()`` together with the insert that
        uses the number, so a rollback also returns the reserved value.

        Args:
            kind: QUOTE or INVOICE
            owner_id: Owner identity
            when: Date the number is allocated for

        Returns:
            Document number

        Raises:
            OwnerContextError: If owner_id is empty
            ConflictError: If a concurrent allocation created the same counter row
            TransientIOError: If the database is unavailable
        """
        if not owner_id:
            raise OwnerContextError("Document numbers require an owner identity")

        scope = self.scope_for(kind, owner_id, when)
        formatter = format_invoice_number if kind == DocumentKind.INVOICE else format_quote_number

        for _ in range(MAX_SKIPS):
            seq = self.db.reserve_sequence(scope)
            number = formatter(when, seq)
            if not self.db.document_number_exists(kind, number):
                logger.info(
                    "document_number_allocated",
                    extra={"kind": kind.value, "scope": scope, "number": number},
                )
                return number
            logger.debug("document_number_skipped", extra={"scope": scope, "number": number})

        raise RuntimeError(f"No free {kind.value.lower()} number found in scope {scope}")
