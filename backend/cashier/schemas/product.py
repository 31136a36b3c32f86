from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from cashier.models.product import MAX_INT


class ProductIn(BaseModel):
    """Body for create and full update. Lower bounds are checked by ProductService."""

    name: str
    price: int = Field(le=MAX_INT)
    stock: int = Field(default=0, le=MAX_INT)


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    price: int
    stock: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
