"""
Order placement: turns a shopper's cart (or an explicit product list) into
persisted orders, for cash-on-delivery and gateway-paid checkouts.

Totals are always computed here from catalog prices and cart quantities.
Neither placement nor verification is idempotent: two concurrent requests from
the same buyer can both read the same cart before either clears it.
"""
import math
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from services.auth_service.models import Address
from services.auth_service.repository import UserRepository
from services.auth_service.schemas import UserSummary
from services.cart_service.repository import CartRepository
from services.cart_service.service import CartService, ResolvedCartEntry
from services.payment_service.gateway import RazorpayGateway, new_receipt_id
from services.payment_service.schemas import GatewayOrder
from services.product_service.repository import ProductRepository
from services.product_service.schemas import ProductResponse
from shared.observability import (
    ecomm_checkout_duration_seconds,
    ecomm_orders_placed_total,
    ecomm_payment_verification_total,
)

from .exceptions import (
    EmptyCartError,
    InvalidAddressError,
    InvalidAmountError,
    PaymentVerificationFailedError,
    ProductNotFoundError,
)
from .models import Order, OrderItem, PaymentMethod, PaymentStatus
from .repository import OrderRepository
from .schemas import CheckoutItem, ResolvedOrder, ShippingAddress

logger = structlog.get_logger(__name__)


def to_minor_units(amount: float) -> int:
    # Razorpay expects the smallest currency unit (paise for INR)
    minor = amount * 100
    if not math.isfinite(minor) or round(minor) < 1:
        raise InvalidAmountError()
    return int(round(minor))


def address_snapshot(address: Address) -> dict:
    return {
        "street": address.street,
        "city": address.city,
        "state": address.state,
        "landmark": address.landmark,
        "zipCode": address.zip_code,
        "country": address.country,
    }


def order_total(items: list[OrderItem]) -> float:
    return sum(item.quantity * item.price for item in items)


class OrderService:
    def __init__(self, db: AsyncSession, gateway: RazorpayGateway):
        self.db = db
        self.gateway = gateway

    # --- helpers ---

    async def _usable_cart(self, buyer_id: int) -> list[ResolvedCartEntry]:
        """Cart entries whose product still exists; EmptyCartError if none remain."""
        entries = [e for e in await CartService.get_resolved_items(self.db, buyer_id) if e.product]
        if not entries:
            raise EmptyCartError()
        return entries

    async def _resolve_address(self, buyer_id: int, index: int) -> dict:
        addresses = await UserRepository.list_addresses(self.db, buyer_id)
        # Negative indices would silently wrap around in a Python list
        if index < 0 or index >= len(addresses):
            raise InvalidAddressError()
        return address_snapshot(addresses[index])

    @staticmethod
    def _items_from_cart(entries: list[ResolvedCartEntry]) -> list[OrderItem]:
        return [
            OrderItem(
                product_id=e.product.id,
                merchant_id=e.product.merchant_id,
                quantity=e.quantity,
                price=e.product.price,
            )
            for e in entries
        ]

    async def _persist(self, order: Order) -> Order:
        order = await OrderRepository.create_order(self.db, order)
        ecomm_orders_placed_total.labels(payment_method=order.payment_method).inc()
        logger.info(
            "order_placed",
            order_id=order.id,
            buyer_id=order.buyer_id,
            payment_method=order.payment_method,
            total_amount=order.total_amount,
            items=len(order.items),
        )
        return order

    # --- operations ---

    async def place_direct_order(
        self, buyer_id: int, lines: list[tuple[int, int]], shipping_address: ShippingAddress
    ) -> list[Order]:
        """
        One order per (product_id, quantity) pair; unknown products are skipped.
        The buyer's cart is cleared afterwards regardless of what was bought.
        """
        with ecomm_checkout_duration_seconds.labels(flow="direct_buy").time():
            placed = []
            address = shipping_address.model_dump(by_alias=True)
            for product_id, quantity in lines:
                product = await ProductRepository.get_product_by_id(self.db, product_id)
                if not product:
                    logger.warning("direct_buy_product_missing", buyer_id=buyer_id, product_id=product_id)
                    continue

                item = OrderItem(
                    product_id=product.id,
                    merchant_id=product.merchant_id,
                    quantity=quantity,
                    price=product.price,
                )
                order = Order(
                    buyer_id=buyer_id,
                    items=[item],
                    total_amount=product.price * quantity,
                    payment_method=PaymentMethod.COD.value,
                    payment_status=PaymentStatus.PENDING.value,
                    shipping_address=address,
                )
                placed.append(await self._persist(order))

            await CartRepository.clear_cart(self.db, buyer_id)
            return placed

    async def prepare_checkout(self, buyer_id: int, product_id: Optional[int] = None) -> list[CheckoutItem]:
        if product_id is not None:
            product = await ProductRepository.get_product_by_id(self.db, product_id)
            if not product:
                raise ProductNotFoundError()
            return [
                CheckoutItem(
                    id=product.id,
                    product_name=product.name,
                    price=product.price,
                    quantity=1,
                    image=product.image_url,
                )
            ]

        entries = await CartService.get_resolved_items(self.db, buyer_id)
        if not entries:
            raise EmptyCartError()

        return [
            CheckoutItem(
                id=e.product.id,
                product_name=e.product.name,
                price=e.product.price,
                quantity=e.quantity,
                image=e.product.image_url,
            )
            for e in entries
            if e.product
        ]

    async def list_buyer_orders(self, buyer_id: int) -> list[ResolvedOrder]:
        orders = await OrderRepository.list_by_buyer(self.db, buyer_id)
        line_items = [item for order in orders for item in order.items]
        products = await ProductRepository.get_products_by_ids(self.db, (i.product_id for i in line_items))
        merchants = await UserRepository.get_many(self.db, (i.merchant_id for i in line_items))

        resolved = []
        for order in orders:
            view = ResolvedOrder.model_validate(order)
            for item in view.items:
                product = products.get(item.product_id)
                merchant = merchants.get(item.merchant_id)
                item.product = ProductResponse.model_validate(product) if product else None
                item.merchant = UserSummary.model_validate(merchant) if merchant else None
            resolved.append(view)
        return resolved

    async def place_cod_order(self, buyer_id: int, selected_address: int) -> Order:
        with ecomm_checkout_duration_seconds.labels(flow="cod").time():
            entries = await self._usable_cart(buyer_id)
            items = self._items_from_cart(entries)
            address = await self._resolve_address(buyer_id, selected_address)

            order = await self._persist(
                Order(
                    buyer_id=buyer_id,
                    items=items,
                    total_amount=order_total(items),
                    payment_method=PaymentMethod.COD.value,
                    payment_status=PaymentStatus.PENDING.value,
                    shipping_address=address,
                )
            )
            await CartRepository.clear_cart(self.db, buyer_id)
            return order

    async def create_payment_intent(self, amount: float) -> GatewayOrder:
        return await self.gateway.create_order(to_minor_units(amount), receipt=new_receipt_id())

    async def create_cart_payment_intent(self, buyer_id: int) -> GatewayOrder:
        entries = await self._usable_cart(buyer_id)
        total = sum(e.quantity * e.product.price for e in entries)
        return await self.create_payment_intent(total)

    async def verify_and_finalize_payment(
        self,
        buyer_id: int,
        gateway_order_id: str,
        gateway_payment_id: str,
        signature: str,
        selected_address: int,
    ) -> Order:
        with ecomm_checkout_duration_seconds.labels(flow="online").time():
            if not self.gateway.verify_signature(gateway_order_id, gateway_payment_id, signature):
                ecomm_payment_verification_total.labels(status="failed").inc()
                logger.warning(
                    "payment_verification_failed",
                    buyer_id=buyer_id,
                    gateway_order_id=gateway_order_id,
                    gateway_payment_id=gateway_payment_id,
                )
                raise PaymentVerificationFailedError()
            ecomm_payment_verification_total.labels(status="success").inc()

            entries = await self._usable_cart(buyer_id)
            address = await self._resolve_address(buyer_id, selected_address)
            items = self._items_from_cart(entries)

            order = await self._persist(
                Order(
                    buyer_id=buyer_id,
                    items=items,
                    total_amount=order_total(items),
                    payment_method=PaymentMethod.ONLINE.value,
                    payment_status=PaymentStatus.PAID.value,
                    shipping_address=address,
                    gateway_order_id=gateway_order_id,
                )
            )
            await CartRepository.clear_cart(self.db, buyer_id)
            return order
