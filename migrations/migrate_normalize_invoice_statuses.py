#!/usr/bin/env python3
"""Migration script to normalize legacy invoice statuses.

Older databases stored invoice statuses that no longer exist. This
migration rewrites them to the current lifecycle:
- ISSUED → SENT
- PARTIAL_PAID → SENT (a partially paid invoice is still outstanding)
- CANCELLED → DRAFT

After rewriting, invoices whose reconciled payments cover their total
are not promoted here; the next payment change recomputes them.

Usage:
    python migrations/migrate_normalize_invoice_statuses.py [--db-path PATH]
"""

import sys
from pathlib import Path

# Add src to path so we can import billkit modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy import inspect
from billkit.database.factories import create_sqlite_database
from billkit.database.models import Invoice
from billkit.domain.entities import InvoiceStatus

LEGACY_STATUS_MAP = {
    "ISSUED": InvoiceStatus.SENT.value,
    "PARTIAL_PAID": InvoiceStatus.SENT.value,
    "CANCELLED": InvoiceStatus.DRAFT.value,
}


def migrate_database(database_path: str | None = None) -> dict[str, int]:
    """Rewrite legacy invoice statuses.

    Args:
        database_path: Path to database file. If None, uses default location.

    Returns:
        Number of invoices rewritten per legacy status

    Raises:
        Exception: If migration fails
    """
    db = create_sqlite_database(database_path=database_path)
    db.connect()

    try:
        session = db.session_factory()
        try:
            engine = session.bind
            if engine is None:
                raise Exception("Could not get database engine from session")

            inspector = inspect(engine)
            if "invoices" not in inspector.get_table_names():
                raise Exception("Table 'invoices' does not exist. Please initialize the database schema first.")

            print("Starting migration: normalizing invoice statuses...")

            counts = {}
            for legacy, current in LEGACY_STATUS_MAP.items():
                counts[legacy] = session.query(Invoice).filter(Invoice.status == legacy).update(
                    {"status": current}, synchronize_session=False
                )
                print(f"  {legacy} → {current}: {counts[legacy]} invoice(s)")

            session.commit()
        finally:
            session.close()

        if not any(counts.values()):
            print("Nothing to migrate: no legacy invoice statuses found")
        else:
            print("Migration completed successfully!")
        return counts

    except Exception as e:
        print(f"Migration failed: {e}")
        raise
    finally:
        db.disconnect()


def main():
    """Main entry point for migration script."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Rewrite legacy invoice statuses (ISSUED, PARTIAL_PAID, CANCELLED)"
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help="Path to database file (overrides BILLKIT_DB_PATH environment variable)",
    )
    args = parser.parse_args()

    try:
        migrate_database(database_path=args.db_path)
        return 0
    except Exception as e:
        print(f"\nMigration failed: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
