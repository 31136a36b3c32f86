import logging
from collections.abc import Callable
from datetime import date, datetime, time, timedelta

from cashier.db.database import Database
from cashier.exceptions import ValidationError
from cashier.models import utcnow
from cashier.repositories.transaction_repository import TransactionRepository
from cashier.schemas.report import BestSellingProduct, SalesSummary

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"


def parse_report_date(value: str | None, field: str) -> date:
    """Parse a YYYY-MM-DD query value."""
    if not value:
        raise ValidationError(f"{field} is required (format YYYY-MM-DD)")
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        raise ValidationError(f"{field} must be a date in YYYY-MM-DD format") from None


class ReportService:
    """Read-only sales summaries over committed transactions."""

    def __init__(self, db: Database, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self.clock = clock

    async def today_summary(self) -> SalesSummary:
        today = self.clock().date()
        return await self.range_summary(today, today)

    async def range_summary(self, start_date: date, end_date: date) -> SalesSummary:
        """Summarize transactions created on ``start_date`` through ``end_date`` (UTC dates)."""
        if start_date > end_date:
            raise ValidationError("start_date must not be after end_date")

        start = datetime.combine(start_date, time.min)
        end = datetime.combine(end_date + timedelta(days=1), time.min)

        async with self.db.session() as session, session.begin():
            # both aggregates must come from the same snapshot
            await session.connection(execution_options=self.db.snapshot_options())
            ledger = TransactionRepository(session)
            revenue, count = await ledger.totals(start, end)
            best = await ledger.best_seller(start, end)

        summary = SalesSummary(total_revenue=revenue, total_transactions=count)
        if best is not None:
            name, quantity = best
            summary.best_selling_product = BestSellingProduct(name=name, quantity=quantity)
        return summary
