import logging

from cashier.db.database import Database
from cashier.exceptions import ConflictError, NotFoundError, ValidationError
from cashier.models import Product
from cashier.repositories.product_repository import ProductRepository
from cashier.schemas.product import ProductIn, ProductOut

logger = logging.getLogger(__name__)


def validate_product(data: ProductIn):
    if not data.name.strip():
        raise ValidationError("product name cannot be empty")
    if data.price <= 0:
        raise ValidationError("product price must be greater than zero")
    if data.stock < 0:
        raise ValidationError("product stock cannot be negative")


class ProductService:
    """Catalog CRUD. Each call is its own short transaction."""

    def __init__(self, db: Database):
        self.db = db

    async def list_products(self, name: str | None = None) -> list[ProductOut]:
        async with self.db.session() as session, session.begin():
            products = await ProductRepository(session).search(name)
            return [ProductOut.model_validate(p) for p in products]

    async def get_product(self, product_id: int) -> ProductOut:
        async with self.db.session() as session, session.begin():
            product = await ProductRepository(session).get(product_id)
            if product is None:
                raise NotFoundError(f"product id {product_id} not found")
            return ProductOut.model_validate(product)

    async def create_product(self, data: ProductIn) -> ProductOut:
        validate_product(data)

        async with self.db.session() as session, session.begin():
            product = await ProductRepository(session).add(
                Product(name=data.name, price=data.price, stock=data.stock)
            )
            result = ProductOut.model_validate(product)

        logger.info(f"Created product {result.id} ({result.name})")
        return result

    async def update_product(self, product_id: int, data: ProductIn) -> ProductOut:
        validate_product(data)

        async with self.db.session() as session, session.begin():
            repo = ProductRepository(session)
            product = await repo.get(product_id)
            if product is None:
                raise NotFoundError(f"product id {product_id} not found")

            product.name = data.name
            product.price = data.price
            product.stock = data.stock
            result = ProductOut.model_validate(await repo.save(product))

        logger.info(f"Updated product {product_id}")
        return result

    async def delete_product(self, product_id: int):
        async with self.db.session() as session, session.begin():
            repo = ProductRepository(session)
            product = await repo.get(product_id)
            if product is None:
                raise NotFoundError(f"product id {product_id} not found")
            if await repo.has_sales(product_id):
                raise ConflictError(
                    f"product id {product_id} has recorded sales and cannot be deleted",
                    details={"product_id": product_id},
                )
            await repo.delete(product)

        logger.info(f"Deleted product {product_id}")
