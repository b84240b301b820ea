from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Address, User


class UserRepository:

    @staticmethod
    async def create(db: AsyncSession, user: User) -> User:
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: int) -> Optional[User]:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalars().first()

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    @staticmethod
    async def get_many(db: AsyncSession, user_ids: Iterable[int]) -> dict[int, User]:
        ids = set(user_ids)
        if not ids:
            return {}
        result = await db.execute(select(User).where(User.id.in_(ids)))
        return {user.id: user for user in result.scalars().all()}

    @staticmethod
    async def add_address(db: AsyncSession, address: Address) -> Address:
        db.add(address)
        await db.commit()
        await db.refresh(address)
        return address

    @staticmethod
    async def list_addresses(db: AsyncSession, user_id: int) -> list[Address]:
        result = await db.execute(
            select(Address).where(Address.user_id == user_id).order_by(Address.id)
        )
        return list(result.scalars().all())
