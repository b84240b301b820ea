from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductCreate(BaseModel):
    name: str = Field(min_length=1)
    price: float = Field(ge=0)
    image_url: Optional[str] = None
    merchant_id: int


class ProductResponse(BaseModel):
    id: int
    name: str
    price: float
    image_url: Optional[str] = None
    merchant_id: int

    model_config = ConfigDict(from_attributes=True)
