from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from cashier.models.product import MAX_INT


class CheckoutItem(BaseModel):
    # quantity > 0 is checked by the checkout service so it answers 400
    product_id: int = Field(gt=0, le=MAX_INT)
    quantity: int = Field(le=MAX_INT)


class CheckoutRequest(BaseModel):
    items: list[CheckoutItem]


class TransactionDetailOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    transaction_id: int
    product_id: int
    product_name: str
    quantity: int
    subtotal: int


class TransactionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    total_amount: int
    created_at: datetime
    details: list[TransactionDetailOut]
