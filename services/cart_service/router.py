from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import MAX_INT_COLUMN, get_db
from shared.security.dependencies import get_current_user

from .schemas import CartItemCreate, CartResponse
from .service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])


@router.get("/", response_model=CartResponse)
async def get_cart(user_id: int = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await CartService.get_cart(db, user_id)


@router.post("/items", response_model=CartResponse)
async def add_item(
    item: CartItemCreate,
    user_id: int = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await CartService.add_item(db, user_id, item)


@router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_item(
    product_id: int = Path(ge=1, le=MAX_INT_COLUMN),
    user_id: int = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await CartService.remove_item(db, user_id, product_id)


@router.delete("/items", status_code=204)
async def clear_cart(user_id: int = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    """Deletes all items in the cart."""
    await CartService.clear_cart(db, user_id)
