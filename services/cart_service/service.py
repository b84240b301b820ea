from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from services.product_service.models import Product
from services.product_service.repository import ProductRepository

from .models import CartItem
from .repository import CartRepository
from .schemas import CartItemCreate, CartItemResponse, CartResponse


@dataclass
class ResolvedCartEntry:
    """A cart row joined with its catalog product (None if the product is gone)."""
    product_id: int
    quantity: int
    product: Optional[Product]


class CartService:
    @staticmethod
    async def get_resolved_items(db: AsyncSession, user_id: int) -> list[ResolvedCartEntry]:
        items = await CartRepository.get_items(db, user_id)
        products = await ProductRepository.get_products_by_ids(db, (i.product_id for i in items))
        return [
            ResolvedCartEntry(i.product_id, i.quantity, products.get(i.product_id))
            for i in items
        ]

    @staticmethod
    async def get_cart(db: AsyncSession, user_id: int) -> CartResponse:
        entries = await CartService.get_resolved_items(db, user_id)
        return CartResponse(
            user_id=user_id,
            items=[CartItemResponse.model_validate(e) for e in entries],
            total=sum(e.quantity * e.product.price for e in entries if e.product),
        )

    @staticmethod
    async def add_item(db: AsyncSession, user_id: int, item_data: CartItemCreate) -> CartResponse:
        product = await ProductRepository.get_product_by_id(db, item_data.product_id)
        if not product:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
        item = CartItem(
            user_id=user_id,
            product_id=item_data.product_id,
            quantity=item_data.quantity
        )
        await CartRepository.add_item(db, item)
        return await CartService.get_cart(db, user_id)

    @staticmethod
    async def remove_item(db: AsyncSession, user_id: int, product_id: int) -> CartResponse:
        if not await CartRepository.remove_item(db, user_id, product_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not in cart")
        return await CartService.get_cart(db, user_id)

    @staticmethod
    async def clear_cart(db: AsyncSession, user_id: int):
        await CartRepository.clear_cart(db, user_id)
