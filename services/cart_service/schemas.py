from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

from services.product_service.schemas import ProductResponse
from shared.config.database import MAX_INT_COLUMN

# Per line item; far below the INTEGER column limit so merged quantities stay storable
MAX_LINE_QUANTITY = 10_000


class CartItemCreate(BaseModel):
    product_id: int = Field(ge=1, le=MAX_INT_COLUMN)
    quantity: int = Field(default=1, ge=1, le=MAX_LINE_QUANTITY)


class CartItemResponse(BaseModel):
    product_id: int
    quantity: int
    product: Optional[ProductResponse] = None  # None once the product was deleted

    model_config = ConfigDict(from_attributes=True)


class CartResponse(BaseModel):
    user_id: int
    items: List[CartItemResponse] = []
    total: float = 0.0
