"""
Checkout Service - turns a cart into one committed ledger transaction.

Each checkout is a single unit of work: lock each product row, check stock,
decrement it, then write the transaction header and its detail lines. Any
failure rolls the whole unit back, so a checkout is either fully committed
or leaves no trace. Coordination between concurrent checkouts is left to the
database (row locks on PostgreSQL, BEGIN IMMEDIATE on SQLite); nothing here
relies on in-process locks.
"""
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from cashier.db.database import Database, is_lock_timeout
from cashier.exceptions import (
    BusyError,
    InsufficientStock,
    PersistenceError,
    ProductNotFound,
    ValidationError,
)
from cashier.models import utcnow
from cashier.repositories.product_repository import ProductRepository
from cashier.repositories.transaction_repository import TransactionRepository
from cashier.schemas.transaction import CheckoutItem, TransactionDetailOut, TransactionOut

logger = logging.getLogger(__name__)


@dataclass
class PendingLine:
    """A detail line that has passed its stock check but is not yet written."""

    product_id: int
    product_name: str
    quantity: int
    subtotal: int


def validate_items(items: Sequence[CheckoutItem]):
    """Reject a cart that can never succeed, before any database work."""
    if not items:
        raise ValidationError("checkout requires at least one item")
    for item in items:
        if item.quantity <= 0:
            raise ValidationError(
                f"quantity for product {item.product_id} must be greater than zero",
                details={"product_id": item.product_id, "quantity": item.quantity},
            )


class CheckoutService:
    """Checkout engine. Safe to share between concurrent requests."""

    def __init__(self, db: Database, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self.clock = clock

    async def checkout(self, items: Sequence[CheckoutItem]) -> TransactionOut:
        """Sell every item in ``items`` or none of them.

        Duplicate product ids are kept as separate lines; each one re-reads
        the row and sees the stock left by the lines before it.

        Raises:
            ValidationError: empty cart or non-positive quantity
            ProductNotFound: an item references a missing product
            InsufficientStock: an item asks for more than is in stock
            BusyError: lock timeout or deadlock while locking product rows
            PersistenceError: any other storage failure, commit included
        """
        validate_items(items)

        try:
            async with self.db.session() as session:
                async with session.begin():
                    await self.db.apply_lock_timeout(session)
                    result = await self._run(session, items)
                # committed on leaving the begin() block
        except DBAPIError as e:
            if is_lock_timeout(e):
                logger.warning(f"Checkout could not acquire product locks: {e.orig}")
                raise BusyError("products are locked by another checkout, try again") from e
            logger.error(f"Checkout database error: {e}")
            raise PersistenceError("failed to record checkout") from e
        except SQLAlchemyError as e:
            logger.error(f"Checkout database error: {e}")
            raise PersistenceError("failed to record checkout") from e
        except (ProductNotFound, InsufficientStock) as e:
            logger.warning(f"Checkout rejected: {e.message}")
            raise

        logger.info(
            f"Checkout committed: transaction={result.id} "
            f"lines={len(result.details)} total={result.total_amount}"
        )
        return result

    async def _run(self, session, items: Sequence[CheckoutItem]) -> TransactionOut:
        products = ProductRepository(session)
        ledger = TransactionRepository(session)

        total_amount = 0
        lines: list[PendingLine] = []

        for item in items:
            product = await products.locked_read(item.product_id)
            if product is None:
                raise ProductNotFound(item.product_id)

            if product.stock < item.quantity:
                raise InsufficientStock(product.id, product.stock, item.quantity)

            subtotal = item.quantity * product.price
            total_amount += subtotal

            if not await products.decrement(product.id, item.quantity):
                # Only reachable when the backend ignored the row lock
                current = await products.locked_read(product.id)
                available = current.stock if current is not None else 0
                raise InsufficientStock(product.id, available, item.quantity)

            lines.append(PendingLine(
                product_id=product.id,
                product_name=product.name,
                quantity=item.quantity,
                subtotal=subtotal
            ))

        transaction = await ledger.insert_transaction(total_amount, self.clock())

        details = []
        for line in lines:
            detail = await ledger.insert_detail(
                transaction.id,
                line.product_id,
                line.product_name,
                line.quantity,
                line.subtotal
            )
            details.append(TransactionDetailOut.model_validate(detail))

        return TransactionOut(
            id=transaction.id,
            total_amount=transaction.total_amount,
            created_at=transaction.created_at,
            details=details
        )
