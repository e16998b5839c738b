"""Shared pytest fixtures for billkit tests."""

import tempfile
import os
from datetime import datetime, UTC
from decimal import Decimal
import pytest

from billkit.config import Settings
from billkit.database.factories import create_sqlite_database
from billkit.domain.clock import FixedClock
from billkit.domain.customer import CustomerService
from billkit.domain.dashboard import DashboardService
from billkit.domain.entities import LineItemInput
from billkit.domain.invoice import InvoiceService
from billkit.domain.payment import PaymentService
from billkit.domain.quote import QuoteService
from billkit.engine import InvoicingEngine
from billkit.logging_config import reset_logging

OWNER = "alice"
OTHER_OWNER = "bob"


@pytest.fixture(autouse=True)
def clean_logging():
    """Leave the billkit logger hierarchy unconfigured between tests."""
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def owner_id():
    """Owner identity used by most tests."""
    return OWNER


@pytest.fixture
def clock():
    """Clock frozen at 2024-01-15 09:00 UTC."""
    return FixedClock(datetime(2024, 1, 15, 9, 0, tzinfo=UTC))


@pytest.fixture
def settings():
    """Default settings: 10% tax, 30 day terms, global quote numbering."""
    return Settings()


@pytest.fixture
def customer_service(temp_db, owner_id):
    """Create a CustomerService with a temporary database."""
    return CustomerService(temp_db, owner_id)


@pytest.fixture
def quote_service(temp_db, owner_id, settings, clock):
    """Create a QuoteService with a temporary database."""
    return QuoteService(temp_db, owner_id, settings, clock)


@pytest.fixture
def invoice_service(temp_db, owner_id, settings, clock):
    """Create an InvoiceService with a temporary database."""
    return InvoiceService(temp_db, owner_id, settings, clock)


@pytest.fixture
def payment_service(temp_db, owner_id, clock):
    """Create a PaymentService with a temporary database."""
    return PaymentService(temp_db, owner_id, clock)


@pytest.fixture
def dashboard_service(temp_db, owner_id, clock):
    """Create a DashboardService with a temporary database."""
    return DashboardService(temp_db, owner_id, clock)


@pytest.fixture
def engine(temp_db, owner_id, settings, clock):
    """Create an InvoicingEngine with a temporary database."""
    return InvoicingEngine(temp_db, owner_id, settings=settings, clock=clock)


@pytest.fixture
def sample_customer(customer_service):
    """Create a sample customer for testing."""
    return customer_service.create_customer(
        name="Acme Corp", email="billing@acme.example", phone="03-1234-5678"
    )


@pytest.fixture
def sample_items():
    """Two line items: 10 x 45000 and 1 x 50000 (subtotal 500000)."""
    return [
        LineItemInput(name="Design", quantity=Decimal("10"), unit_price=Decimal("45000")),
        LineItemInput(
            name="Hosting", quantity=Decimal("1"), unit_price=Decimal("50000"), description="First year"
        ),
    ]


@pytest.fixture
def sample_quote(quote_service, sample_customer, sample_items):
    """Create a DRAFT quote for the sample customer."""
    return quote_service.create_quote(sample_customer.id, sample_items, notes="Thank you")


@pytest.fixture
def accepted_quote(quote_service, sample_quote):
    """Move the sample quote through SENT to ACCEPTED."""
    quote_service.send_quote(sample_quote.id)
    return quote_service.accept_quote(sample_quote.id)


@pytest.fixture
def sample_invoice(invoice_service, accepted_quote):
    """Convert the accepted quote into a DRAFT invoice (total 550000)."""
    return invoice_service.convert_quote_to_invoice(accepted_quote.id)


@pytest.fixture
def sent_invoice(invoice_service, sample_customer):
    """A SENT invoice with a total of 110000 (100000 + 10% tax)."""
    invoice = invoice_service.create_invoice(
        sample_customer.id,
        [LineItemInput(name="Consulting", quantity=Decimal("1"), unit_price=Decimal("100000"))],
        issued_at=datetime(2024, 1, 10).date(),
        due_date=datetime(2024, 2, 9).date(),
    )
    return invoice_service.mark_sent(invoice.id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
