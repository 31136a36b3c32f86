from sqlalchemy import select, update, exists
from sqlalchemy.ext.asyncio import AsyncSession

from cashier.models import Product, TransactionDetail


class ProductRepository:
    """Product table access. Every method runs inside the caller's transaction."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def search(self, name: str | None = None) -> list[Product]:
        stmt = select(Product).order_by(Product.id)
        if name:
            stmt = stmt.where(Product.name.ilike(f"%{name}%"))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get(self, product_id: int) -> Product | None:
        return await self.session.get(Product, product_id)

    async def add(self, product: Product) -> Product:
        self.session.add(product)
        await self.session.flush()
        await self.session.refresh(product)
        return product

    async def save(self, product: Product) -> Product:
        await self.session.flush()
        await self.session.refresh(product)
        return product

    async def delete(self, product: Product):
        await self.session.delete(product)
        await self.session.flush()

    async def has_sales(self, product_id: int) -> bool:
        stmt = select(exists().where(TransactionDetail.product_id == product_id))
        return bool(await self.session.scalar(stmt))

    async def locked_read(self, product_id: int) -> Product | None:
        """Read a product row and hold its lock until the transaction ends.

        populate_existing makes a second read of the same row in one
        transaction see the stock already decremented by an earlier line.
        """
        stmt = (
            select(Product)
            .where(Product.id == product_id)
            .with_for_update()  # Row-level lock
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def decrement(self, product_id: int, amount: int) -> bool:
        """Take ``amount`` off the stock, only if that much is left.

        Returns False when no row was changed.
        """
        stmt = (
            update(Product)
            .where(Product.id == product_id, Product.stock >= amount)
            .values(stock=Product.stock - amount)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
