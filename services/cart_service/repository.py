from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from .models import CartItem
from .schemas import MAX_LINE_QUANTITY

class CartRepository:
    @staticmethod
    async def get_items(db: AsyncSession, user_id: int) -> list[CartItem]:
        result = await db.execute(
            select(CartItem).where(CartItem.user_id == user_id).order_by(CartItem.id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def add_item(db: AsyncSession, item: CartItem):
        result = await db.execute(
            select(CartItem)
            .where(CartItem.user_id == item.user_id)
            .where(CartItem.product_id == item.product_id)
        )
        existing_item = result.scalars().first()

        if existing_item:
            existing_item.quantity = min(existing_item.quantity + item.quantity, MAX_LINE_QUANTITY)
        else:
            db.add(item)

        await db.commit()
        return True

    @staticmethod
    async def remove_item(db: AsyncSession, user_id: int, product_id: int) -> bool:
        stmt = delete(CartItem).where(
            CartItem.user_id == user_id,
            CartItem.product_id == product_id
        )
        result = await db.execute(stmt)
        await db.commit()
        return result.rowcount > 0

    @staticmethod
    async def clear_cart(db: AsyncSession, user_id: int):
        """Deletes all items in the user's cart and commits."""
        stmt = delete(CartItem).where(CartItem.user_id == user_id)
        await db.execute(stmt)
        await db.commit()
