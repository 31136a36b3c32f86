from pydantic import BaseModel


class BestSellingProduct(BaseModel):
    name: str
    quantity: int


class SalesSummary(BaseModel):
    total_revenue: int = 0
    total_transactions: int = 0
    best_selling_product: BestSellingProduct | None = None
