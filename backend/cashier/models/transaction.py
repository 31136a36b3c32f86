from datetime import datetime, timezone

from sqlalchemy import BigInteger, Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from cashier.db.database import Base


class Transaction(Base):
    """Ledger header. Rows are only ever inserted."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    total_amount = Column(BigInteger, nullable=False)
    # naive UTC, assigned by the checkout service
    created_at = Column(DateTime, nullable=False, index=True)

    # Relationships
    details = relationship(
        "TransactionDetail",
        back_populates="transaction",
        order_by="TransactionDetail.id",
    )


class TransactionDetail(Base):
    __tablename__ = "transaction_details"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    product_name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    subtotal = Column(BigInteger, nullable=False)

    # Relationships
    transaction = relationship("Transaction", back_populates="details")


def utcnow() -> datetime:
    """Ledger timestamps are naive UTC so they compare the same on every backend."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
