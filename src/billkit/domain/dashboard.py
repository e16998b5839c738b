"""Dashboard figures for one owner."""

from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from dateutil.relativedelta import relativedelta

from billkit.database.base import Database
from billkit.domain.clock import Clock, SystemClock
from billkit.domain.entities import DashboardKPI, InvoiceStatus, PaymentStatus
from billkit.domain.errors import require_owner

OVERDUE_LIST_SIZE = 5
RECENT_LIST_SIZE = 3

UNPAID_STATUSES = (InvoiceStatus.SENT, InvoiceStatus.OVERDUE)


def month_bounds(day: date) -> tuple[date, date]:
    """Return the first and last day of the month containing day."""
    start = day.replace(day=1)
    end = start + relativedelta(months=1) - timedelta(days=1)
    return start, end


class DashboardService:
    """Service computing dashboard KPIs."""

    def __init__(self, db: Database, owner_id: str, clock: Optional[Clock] = None):
        """Initialize dashboard service.

        Args:
            db: Database instance
            owner_id: Owner identity
            clock: Clock used for "this month" (system clock when None)
        """
        self.db = db
        self.owner_id = require_owner(owner_id)
        self.clock = clock or SystemClock()

    def get_kpis(self, today: Optional[date] = None) -> DashboardKPI:
        """Compute headline figures.

        Monthly sales sum the totals of invoices issued this month. Monthly
        payments sum RECONCILED payments paid this month. Unpaid is the
        outstanding remainder of SENT and OVERDUE invoices.

        Args:
            today: Reference date (clock date when None)

        Returns:
            DashboardKPI
        """
        today = today or self.clock.today()
        start, end = month_bounds(today)

        monthly_invoices = self.db.list_invoices(self.owner_id, issued_from=start, issued_to=end)
        monthly_sales = sum((inv.total for inv in monthly_invoices), Decimal(0))

        monthly_reconciled = self.db.list_payments(
            self.owner_id, status=PaymentStatus.RECONCILED, paid_from=start, paid_to=end
        )
        monthly_payments = sum((p.amount for p in monthly_reconciled), Decimal(0))

        unpaid_invoices = self.db.list_invoices(self.owner_id, statuses=UNPAID_STATUSES)
        total_unpaid = sum(
            (inv.total - self.db.sum_reconciled_payments(inv.id) for inv in unpaid_invoices),
            Decimal(0),
        )

        all_invoices = self.db.list_invoices(self.owner_id)
        status_counts = {status.value: 0 for status in InvoiceStatus}
        for inv in all_invoices:
            status_counts[inv.status.value] += 1

        return DashboardKPI(
            monthly_sales=monthly_sales,
            monthly_payments=monthly_payments,
            total_unpaid=total_unpaid,
            customer_count=self.db.count_customers(self.owner_id),
            status_counts=status_counts,
            overdue_invoices=self.db.list_invoices(
                self.owner_id,
                statuses=UNPAID_STATUSES,
                due_before=today,
                order_by_due_date=True,
                limit=OVERDUE_LIST_SIZE,
            ),
            recent_quotes=self.db.list_quotes(self.owner_id, limit=RECENT_LIST_SIZE),
            recent_invoices=self.db.list_invoices(self.owner_id, limit=RECENT_LIST_SIZE),
            recent_payments=self.db.list_payments(self.owner_id, limit=RECENT_LIST_SIZE),
        )
