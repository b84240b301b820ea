from sqlalchemy.ext.asyncio import AsyncSession
from .models import Product
from .repository import ProductRepository
from .schemas import ProductCreate

class ProductService:

    @staticmethod
    async def create_product(db: AsyncSession, data: ProductCreate):
        product = Product(
            name=data.name,
            price=data.price,
            image_url=data.image_url,
            merchant_id=data.merchant_id,
        )
        return await ProductRepository.create_product(db, product)

    @staticmethod
    async def list_products(db: AsyncSession):
        return await ProductRepository.get_all_products(db)

    @staticmethod
    async def get_product_by_id(db: AsyncSession, product_id: int):
        return await ProductRepository.get_product_by_id(db, product_id)

    @staticmethod
    async def delete_product(db: AsyncSession, product_id: int) -> bool:
        # Cart rows and order line items keep the id; readers treat it as gone
        product = await ProductRepository.get_product_by_id(db, product_id)
        if not product:
            return False
        await ProductRepository.delete_product(db, product)
        return True
