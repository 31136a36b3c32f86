from datetime import datetime

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from cashier.models import Product, Transaction, TransactionDetail


class TransactionRepository:
    """Append-only ledger access: inserts and read-only aggregates."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert_transaction(self, total_amount: int, created_at: datetime) -> Transaction:
        transaction = Transaction(total_amount=total_amount, created_at=created_at)
        self.session.add(transaction)
        await self.session.flush()  # Get ID
        return transaction

    async def insert_detail(
        self,
        transaction_id: int,
        product_id: int,
        product_name: str,
        quantity: int,
        subtotal: int
    ) -> TransactionDetail:
        detail = TransactionDetail(
            transaction_id=transaction_id,
            product_id=product_id,
            product_name=product_name,
            quantity=quantity,
            subtotal=subtotal
        )
        self.session.add(detail)
        await self.session.flush()
        return detail

    async def totals(self, start: datetime, end: datetime) -> tuple[int, int]:
        """Revenue and transaction count for ``start <= created_at < end``."""
        stmt = (
            select(
                func.coalesce(func.sum(Transaction.total_amount), 0),
                func.count(Transaction.id)
            )
            .where(Transaction.created_at >= start, Transaction.created_at < end)
        )
        revenue, count = (await self.session.execute(stmt)).one()
        return int(revenue), int(count)

    async def best_seller(self, start: datetime, end: datetime) -> tuple[str, int] | None:
        """Product with the most units sold in the window, lowest id on ties."""
        quantity = func.sum(TransactionDetail.quantity).label("quantity")
        stmt = (
            select(Product.name, quantity)
            .select_from(TransactionDetail)
            .join(Transaction, TransactionDetail.transaction_id == Transaction.id)
            .join(Product, TransactionDetail.product_id == Product.id)
            .where(Transaction.created_at >= start, Transaction.created_at < end)
            .group_by(Product.id, Product.name)
            .order_by(quantity.desc(), Product.id.asc())
            .limit(1)
        )
        row = (await self.session.execute(stmt)).first()
        if row is None:
            return None
        return row.name, int(row.quantity)
