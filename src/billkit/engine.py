"""Request-scoped facade over the domain services.

Each public method runs one operation for one owner and returns an
OperationResult instead of raising for expected failures. Programming
errors (such as a missing owner identity) still raise.
"""

from datetime import date
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from billkit.config import Settings
from billkit.database.base import Database
from billkit.domain.clock import Clock, SystemClock
from billkit.domain.customer import CustomerService
from billkit.domain.dashboard import DashboardService
from billkit.domain.entities import LineItemInput
from billkit.domain.errors import DomainError, ValidationError, require_owner
from billkit.domain.invoice import InvoiceService
from billkit.domain.payment import PaymentService
from billkit.domain.quote import QuoteService
from billkit.domain.results import OperationResult
from billkit.logging_config import get_logger

logger = get_logger("engine")

ItemLike = Union[LineItemInput, Mapping[str, Any]]


def to_line_items(items: Optional[Iterable[ItemLike]]) -> list[LineItemInput]:
    """Accept LineItemInput objects or plain mappings with name/quantity/unit_price.

    Raises:
        ValidationError: If a mapping lacks a required key
    """
    result = []
    for i, item in enumerate(items or []):
        if isinstance(item, LineItemInput):
            result.append(item)
            continue
        try:
            result.append(
                LineItemInput(
                    name=item["name"],
                    quantity=item["quantity"],
                    unit_price=item.get("unit_price", item.get("unitPrice")),
                    description=item.get("description"),
                )
            )
        except KeyError as exc:
            raise ValidationError(f"Item {i + 1}: missing field {exc.args[0]}")
    return result


class InvoicingEngine:
    """Document lifecycle operations for one owner."""

    def __init__(
        self,
        db: Database,
        owner_id: str,
        settings: Optional[Settings] = None,
        clock: Optional[Clock] = None,
    ):
        self.db = db
        self.owner_id = require_owner(owner_id)
        self.settings = settings or Settings()
        self.clock = clock or SystemClock()
        self.customers = CustomerService(db, owner_id)
        self.quotes = QuoteService(db, owner_id, self.settings, self.clock)
        self.invoices = InvoiceService(db, owner_id, self.settings, self.clock)
        self.payments = PaymentService(db, owner_id, self.clock)
        self.dashboard = DashboardService(db, owner_id, self.clock)

    def _run(self, operation: str, func: Callable[..., Any], *args: Any, **kwargs: Any) -> OperationResult:
        try:
            data = func(*args, **kwargs)
        except ValidationError as exc:
            logger.info(
                "operation_rejected",
                extra={"operation": operation, "owner_id": self.owner_id, "error_kind": exc.kind, "error": str(exc)},
            )
            return OperationResult.fail(exc)
        except DomainError as exc:
            logger.warning(
                "operation_failed",
                extra={"operation": operation, "owner_id": self.owner_id, "error_kind": exc.kind, "error": str(exc)},
            )
            return OperationResult.fail(exc)
        return OperationResult.ok(data)

    # Customers
    def create_customer(
        self,
        name: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
    ) -> OperationResult:
        return self._run("create_customer", self.customers.create_customer, name, email, phone, address)

    def update_customer(
        self,
        customer_id: int,
        name: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
    ) -> OperationResult:
        return self._run(
            "update_customer", self.customers.update_customer, customer_id, name, email, phone, address
        )

    def delete_customer(self, customer_id: int) -> OperationResult:
        return self._run("delete_customer", self.customers.delete_customer, customer_id)

    def list_customers(self, search: Optional[str] = None) -> OperationResult:
        return self._run("list_customers", self.customers.list_customers, search)

    # Quotes
    def create_quote(
        self,
        customer_id: int,
        items: Iterable[ItemLike],
        issued_at: Optional[date] = None,
        valid_until: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> OperationResult:
        def create() -> Any:
            return self.quotes.create_quote(
                customer_id, to_line_items(items), issued_at=issued_at, valid_until=valid_until, notes=notes
            )

        return self._run("create_quote", create)

    def update_quote_status(self, quote_id: int, status: Any) -> OperationResult:
        return self._run("update_quote_status", self.quotes.update_quote_status, quote_id, status)

    def delete_quote(self, quote_id: int) -> OperationResult:
        return self._run("delete_quote", self.quotes.delete_quote, quote_id)

    def get_quote(self, quote_id: int) -> OperationResult:
        return self._run("get_quote", self.quotes.require_quote, quote_id)

    def list_quotes(self, status: Optional[Any] = None, search: Optional[str] = None) -> OperationResult:
        return self._run("list_quotes", self.quotes.list_quotes, status=status, search=search)

    def convert_quote_to_invoice(self, quote_id: int) -> OperationResult:
        return self._run("convert_quote_to_invoice", self.invoices.convert_quote_to_invoice, quote_id)

    # Invoices
    def create_invoice(
        self,
        customer_id: int,
        items: Iterable[ItemLike],
        issued_at: date,
        due_date: date,
        notes: Optional[str] = None,
    ) -> OperationResult:
        def create() -> Any:
            return self.invoices.create_invoice(
                customer_id, to_line_items(items), issued_at=issued_at, due_date=due_date, notes=notes
            )

        return self._run("create_invoice", create)

    def update_invoice_status(self, invoice_id: int, status: Any) -> OperationResult:
        return self._run("update_invoice_status", self.invoices.update_invoice_status, invoice_id, status)

    def delete_invoice(self, invoice_id: int) -> OperationResult:
        return self._run("delete_invoice", self.invoices.delete_invoice, invoice_id)

    def get_invoice(self, invoice_id: int) -> OperationResult:
        return self._run("get_invoice", self.invoices.require_invoice, invoice_id)

    def list_invoices(self, status: Optional[Any] = None, search: Optional[str] = None) -> OperationResult:
        return self._run("list_invoices", self.invoices.list_invoices, status=status, search=search)

    def mark_overdue_invoices(self, today: Optional[date] = None) -> OperationResult:
        return self._run("mark_overdue_invoices", self.invoices.mark_overdue_invoices, today)

    # Payments
    def create_payment(
        self,
        invoice_id: int,
        amount: Any,
        paid_at: Optional[date] = None,
        method: Any = "BANK_TRANSFER",
        status: Any = "RECORDED",
        notes: Optional[str] = None,
    ) -> OperationResult:
        return self._run(
            "create_payment",
            self.payments.create_payment,
            invoice_id,
            amount,
            paid_at=paid_at,
            method=method,
            status=status,
            notes=notes,
        )

    def update_payment(
        self,
        payment_id: int,
        amount: Any = None,
        paid_at: Optional[date] = None,
        method: Any = None,
        status: Any = None,
        notes: Optional[str] = None,
    ) -> OperationResult:
        return self._run(
            "update_payment",
            self.payments.update_payment,
            payment_id,
            amount=amount,
            paid_at=paid_at,
            method=method,
            status=status,
            notes=notes,
        )

    def delete_payment(self, payment_id: int) -> OperationResult:
        return self._run("delete_payment", self.payments.delete_payment, payment_id)

    def list_payments(
        self,
        status: Optional[Any] = None,
        search: Optional[str] = None,
        invoice_id: Optional[int] = None,
    ) -> OperationResult:
        return self._run(
            "list_payments", self.payments.list_payments, status=status, search=search, invoice_id=invoice_id
        )

    def get_invoice_balance(self, invoice_id: int) -> OperationResult:
        return self._run("get_invoice_balance", self.payments.get_invoice_balance, invoice_id)

    # Dashboard
    def get_dashboard(self, today: Optional[date] = None) -> OperationResult:
        return self._run("get_dashboard", self.dashboard.get_kpis, today)
