"""SQLAlchemy models for billkit database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Text,
    Index,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

from billkit.domain.amounts import MONEY_PLACES, QUANTITY_PLACES

Base = declarative_base()

MONEY = Numeric(14, MONEY_PLACES)
QUANTITY = Numeric(12, QUANTITY_PLACES)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Customer(Base):
    """Customer model."""

    __tablename__ = "customers"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String(64), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    address = Column(String(200), nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    quotes = relationship("Quote", back_populates="customer")
    invoices = relationship("Invoice", back_populates="customer")


class Quote(Base):
    """Quote model."""

    __tablename__ = "quotes"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String(64), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    quote_number = Column(String(32), unique=True, nullable=False)
    status = Column(String(16), nullable=False, default="DRAFT")
    issued_at = Column(Date, nullable=True)
    valid_until = Column(Date, nullable=True)
    subtotal = Column(MONEY, nullable=False)
    tax = Column(MONEY, nullable=False)
    total = Column(MONEY, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    customer = relationship("Customer", back_populates="quotes")
    items = relationship(
        "QuoteItem",
        back_populates="quote",
        cascade="all, delete-orphan",
        order_by="QuoteItem.position",
    )
    invoice = relationship("Invoice", back_populates="quote", uselist=False)


class QuoteItem(Base):
    """Quote line item model."""

    __tablename__ = "quote_items"

    id = Column(Integer, primary_key=True)
    quote_id = Column(Integer, ForeignKey("quotes.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    quantity = Column(QUANTITY, nullable=False)
    unit_price = Column(MONEY, nullable=False)
    amount = Column(MONEY, nullable=False)

    # Relationships
    quote = relationship("Quote", back_populates="items")


class Invoice(Base):
    """Invoice model."""

    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String(64), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    # Unique: a quote converts to at most one invoice
    quote_id = Column(
        Integer, ForeignKey("quotes.id", ondelete="SET NULL"), unique=True, nullable=True
    )
    invoice_number = Column(String(32), unique=True, nullable=False)
    status = Column(String(16), nullable=False, default="DRAFT")
    issued_at = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False)
    subtotal = Column(MONEY, nullable=False)
    tax = Column(MONEY, nullable=False)
    total = Column(MONEY, nullable=False)
    paid_amount = Column(MONEY, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    customer = relationship("Customer", back_populates="invoices")
    quote = relationship("Quote", back_populates="invoice")
    items = relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.position",
    )
    payments = relationship("Payment", back_populates="invoice", cascade="all, delete-orphan")


class InvoiceItem(Base):
    """Invoice line item model."""

    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    quantity = Column(QUANTITY, nullable=False)
    unit_price = Column(MONEY, nullable=False)
    amount = Column(MONEY, nullable=False)

    # Relationships
    invoice = relationship("Invoice", back_populates="items")


class Payment(Base):
    """Payment model."""

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String(64), nullable=False, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False)
    amount = Column(MONEY, nullable=False)
    paid_at = Column(Date, nullable=False)
    method = Column(String(16), nullable=False)
    status = Column(String(16), nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    __table_args__ = (Index("ix_payments_invoice_status", "invoice_id", "status"),)

    # Relationships
    invoice = relationship("Invoice", back_populates="payments")


class DocumentSequence(Base):
    """Counter row per numbering scope (e.g. 'INV:alice:20240115', 'QT:2024')."""

    __tablename__ = "document_sequences"

    id = Column(Integer, primary_key=True)
    scope = Column(String(100), unique=True, nullable=False)
    last_value = Column(Integer, nullable=False, default=0)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine: Engine = create_engine(database_url, echo=False)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
