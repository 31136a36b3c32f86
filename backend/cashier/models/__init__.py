from cashier.models.product import MAX_INT, Product
from cashier.models.transaction import Transaction, TransactionDetail, utcnow

__all__ = ["MAX_INT", "Product", "Transaction", "TransactionDetail", "utcnow"]
