from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from services.auth_service.schemas import UserSummary
from services.auth_service.service import AuthService
from services.payment_service.gateway import RazorpayGateway, UpstreamGatewayError, get_payment_gateway
from shared.config.database import MAX_INT_COLUMN, get_db
from shared.security import create_order_limit, get_current_user, limiter

from .exceptions import EmptyCartError, OrderError, ProductNotFoundError
from .schemas import (
    CheckoutView,
    DirectBuyRequest,
    FailureResponse,
    OrderHistoryView,
    OrderResponse,
    PaymentIntentRequest,
    PaymentIntentResponse,
    PlaceCodRequest,
    PlaceOrderResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from .service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

CART_VIEW_URL = "/cart/"


def get_order_service(
    db: AsyncSession = Depends(get_db),
    gateway: RazorpayGateway = Depends(get_payment_gateway),
) -> OrderService:
    return OrderService(db, gateway)


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=FailureResponse(message=message).model_dump(),
    )


@router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "order", "status": "running"}


@router.post("/buy", status_code=status.HTTP_303_SEE_OTHER)
async def buy(
    request: Request,
    payload: DirectBuyRequest,
    user_id: int = Depends(get_current_user),
    orders: OrderService = Depends(get_order_service),
):
    await orders.place_direct_order(user_id, payload.lines(), payload.shipping_address)
    return RedirectResponse(
        url=str(request.url_for("your_orders")), status_code=status.HTTP_303_SEE_OTHER
    )


@router.get("/checkout", response_model=CheckoutView)
async def checkout(
    product_id: Optional[int] = Query(default=None, alias="productId", ge=1, le=MAX_INT_COLUMN),
    user_id: int = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    orders: OrderService = Depends(get_order_service),
):
    user = await AuthService.get_user_by_id(db, user_id)
    try:
        items = await orders.prepare_checkout(user_id, product_id)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except EmptyCartError:
        return RedirectResponse(url=CART_VIEW_URL, status_code=status.HTTP_303_SEE_OTHER)
    return CheckoutView(cart_items=items, user=UserSummary.model_validate(user))


@router.get("/your-orders", response_model=OrderHistoryView, name="your_orders")
async def your_orders(
    user_id: int = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    orders: OrderService = Depends(get_order_service),
):
    user = await AuthService.get_user_by_id(db, user_id)
    history = await orders.list_buyer_orders(user_id)
    return OrderHistoryView(orders=history, user=UserSummary.model_validate(user))


# --- Razorpay integration ---

@router.post(
    "/create-order",
    response_model=PaymentIntentResponse,
    responses={400: {"model": FailureResponse}, 502: {"model": FailureResponse}},
)
@limiter.limit(create_order_limit)  # Public endpoint: throttled per IP
async def create_order(
    request: Request,  # REQUIRED: slowapi needs this to check IP/Headers
    payload: PaymentIntentRequest,
    orders: OrderService = Depends(get_order_service),
):
    try:
        gateway_order = await orders.create_payment_intent(payload.amount)
    except OrderError as e:
        return _failure(status.HTTP_400_BAD_REQUEST, str(e))
    except UpstreamGatewayError:
        return _failure(status.HTTP_502_BAD_GATEWAY, "Failed to create order")
    return PaymentIntentResponse(
        order_id=gateway_order.id, amount=gateway_order.amount, currency=gateway_order.currency
    )


@router.post(
    "/create-razorpay",
    response_model=PaymentIntentResponse,
    responses={400: {"model": FailureResponse}, 502: {"model": FailureResponse}},
)
async def create_razorpay(
    user_id: int = Depends(get_current_user),
    orders: OrderService = Depends(get_order_service),
):
    try:
        gateway_order = await orders.create_cart_payment_intent(user_id)
    except OrderError as e:
        return _failure(status.HTTP_400_BAD_REQUEST, str(e))
    except UpstreamGatewayError:
        return _failure(status.HTTP_502_BAD_GATEWAY, "Failed to create order")
    return PaymentIntentResponse(
        order_id=gateway_order.id, amount=gateway_order.amount, currency=gateway_order.currency
    )


# --- Cash on Delivery ---

@router.post(
    "/place-cod",
    response_model=PlaceOrderResponse,
    response_model_exclude_none=True,
    responses={400: {"model": FailureResponse}},
)
async def place_cod(
    payload: PlaceCodRequest,
    user_id: int = Depends(get_current_user),
    orders: OrderService = Depends(get_order_service),
):
    try:
        order = await orders.place_cod_order(user_id, payload.selected_address)
    except OrderError as e:
        return _failure(status.HTTP_400_BAD_REQUEST, str(e))
    return PlaceOrderResponse(
        success=True, order_id=order.id, message="COD order placed successfully"
    )


# --- Verify online payment ---

@router.post(
    "/verify-payment",
    response_model=VerifyPaymentResponse,
    response_model_exclude_none=True,
    responses={400: {"model": FailureResponse}},
)
async def verify_payment(
    payload: VerifyPaymentRequest,
    user_id: int = Depends(get_current_user),
    orders: OrderService = Depends(get_order_service),
):
    try:
        order = await orders.verify_and_finalize_payment(
            user_id,
            payload.razorpay_order_id,
            payload.razorpay_payment_id,
            payload.razorpay_signature,
            payload.selected_address,
        )
    except OrderError as e:
        return _failure(status.HTTP_400_BAD_REQUEST, str(e))
    return VerifyPaymentResponse(success=True, order=OrderResponse.model_validate(order))
