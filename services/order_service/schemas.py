from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from services.auth_service.schemas import AddressBase, UserSummary
from services.cart_service.schemas import MAX_LINE_QUANTITY
from services.product_service.schemas import ProductResponse
from shared.config.database import MAX_INT_COLUMN

# Largest single payment intent accepted, in major units (rupees)
MAX_PAYMENT_AMOUNT = 10_000_000


# --- Requests ---

class ShippingAddress(AddressBase):
    pass


class DirectBuyRequest(BaseModel):
    """
    Body of POST /orders/buy. `productId` and `quantity` may be scalars (a single
    product) or parallel lists of the same length.
    """
    product_ids: Union[int, List[int]] = Field(alias="productId")
    quantities: Union[int, List[int]] = Field(default=1, alias="quantity")
    shipping_address: ShippingAddress = Field(alias="shippingAddress")

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="after")
    def _pair_up(self):
        if not isinstance(self.product_ids, list):
            self.product_ids = [self.product_ids]
        if not isinstance(self.quantities, list):
            self.quantities = [self.quantities]
        if len(self.product_ids) != len(self.quantities):
            raise ValueError("productId and quantity must have the same number of entries")
        if any(p < 1 or p > MAX_INT_COLUMN for p in self.product_ids):
            raise ValueError("productId is out of range")
        if any(q < 1 or q > MAX_LINE_QUANTITY for q in self.quantities):
            raise ValueError(f"quantity must be between 1 and {MAX_LINE_QUANTITY}")
        return self

    def lines(self) -> list[tuple[int, int]]:
        return list(zip(self.product_ids, self.quantities))


class PaymentIntentRequest(BaseModel):
    amount: float = Field(gt=0, le=MAX_PAYMENT_AMOUNT, allow_inf_nan=False)  # major units, e.g. rupees


class PlaceCodRequest(BaseModel):
    selected_address: int = Field(alias="selectedAddress")

    model_config = ConfigDict(populate_by_name=True)


class VerifyPaymentRequest(BaseModel):
    razorpay_order_id: str
    razorpay_payment_id: str
    razorpay_signature: str
    selected_address: int = Field(alias="selectedAddress")

    model_config = ConfigDict(populate_by_name=True)


# --- Responses ---

class OrderItemResponse(BaseModel):
    id: int
    product_id: int
    merchant_id: int
    quantity: int
    price: float
    status: str
    tracking_id: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class OrderResponse(BaseModel):
    id: int
    buyer_id: int
    items: List[OrderItemResponse]
    total_amount: float
    payment_method: str
    payment_status: str
    shipping_address: dict
    gateway_order_id: Optional[str] = None
    placed_at: datetime
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ResolvedOrderItem(OrderItemResponse):
    """Line item with its product and merchant looked up; None if since deleted."""
    product: Optional[ProductResponse] = None
    merchant: Optional[UserSummary] = None


class ResolvedOrder(OrderResponse):
    items: List[ResolvedOrderItem]


class OrderHistoryView(BaseModel):
    orders: List[ResolvedOrder]
    user: UserSummary


class CheckoutItem(BaseModel):
    id: int = Field(alias="_id")
    product_name: str = Field(alias="productName")
    price: float
    quantity: int
    image: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class CheckoutView(BaseModel):
    cart_items: List[CheckoutItem] = Field(alias="cartItems")
    user: UserSummary

    model_config = ConfigDict(populate_by_name=True)


class PaymentIntentResponse(BaseModel):
    success: bool = True
    order_id: str = Field(alias="orderId")
    amount: int
    currency: str

    model_config = ConfigDict(populate_by_name=True)


class PlaceOrderResponse(BaseModel):
    success: bool
    order_id: Optional[int] = Field(default=None, alias="orderId")
    message: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class VerifyPaymentResponse(BaseModel):
    success: bool
    order: Optional[OrderResponse] = None
    message: Optional[str] = None


class FailureResponse(BaseModel):
    success: bool = False
    message: str
