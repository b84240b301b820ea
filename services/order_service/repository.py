from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from .models import Order

class OrderRepository:
    @staticmethod
    async def create_order(db: AsyncSession, order: Order):
        db.add(order)
        await db.commit()
        await db.refresh(order)
        return order

    @staticmethod
    async def list_by_buyer(db: AsyncSession, buyer_id: int):
        # Newest first; id breaks ties between orders placed in the same instant
        result = await db.execute(
            select(Order)
            .where(Order.buyer_id == buyer_id)
            .order_by(Order.placed_at.desc(), Order.id.desc())
        )
        return list(result.scalars().all())
