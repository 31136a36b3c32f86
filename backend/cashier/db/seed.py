import asyncio
import logging

from sqlalchemy import select

from cashier.config import Settings
from cashier.db.database import Database
from cashier.models import Product

logger = logging.getLogger(__name__)


# Sample products: (name, price, stock)
PRODUCTS_DATA = [
    ("Indomie Goreng", 3000, 50),
    ("Aqua 600ml", 4000, 100),
    ("Teh Botol", 5000, 60),
    ("Kopi Kapal Api", 1500, 200),
    ("Roti Tawar", 15000, 20),
    ("Gula Pasir 1kg", 17000, 30),
    ("Minyak Goreng 1L", 19000, 25),
    ("Telur (10 butir)", 28000, 15),
]


async def seed_database(db: Database):
    await db.create_all()

    async with db.session() as session, session.begin():
        # Check if data exists
        result = await session.execute(select(Product).limit(1))
        if result.scalar():
            logger.info("Database already seeded")
            return

        for name, price, stock in PRODUCTS_DATA:
            session.add(Product(name=name, price=price, stock=stock))

    logger.info(f"Seeded {len(PRODUCTS_DATA)} products")


async def main():
    logging.basicConfig(level=logging.INFO)
    db = Database(Settings())
    await db.connect()
    try:
        await seed_database(db)
    finally:
        await db.disconnect()


if __name__ == "__main__":
    asyncio.run(main())
