from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession
from shared.config.database import MAX_INT_COLUMN, get_db
from shared.security.dependencies import verify_internal_api_key
from .schemas import ProductCreate, ProductResponse
from .service import ProductService

# Catalog writes are internal-only; reads are public
router = APIRouter(prefix="/products", tags=["Products"], dependencies=[Depends(verify_internal_api_key)])
public_router = APIRouter(prefix="/products", tags=["Products"])


@router.post("/", response_model=ProductResponse, status_code=201)
async def create_product(
    product: ProductCreate,
    db: AsyncSession = Depends(get_db)
):
    return await ProductService.create_product(db, product)


@router.delete("/{product_id}", status_code=204)
async def delete_product(
    product_id: int = Path(ge=1, le=MAX_INT_COLUMN),
    db: AsyncSession = Depends(get_db)
):
    if not await ProductService.delete_product(db, product_id):
        raise HTTPException(status_code=404, detail="Product not found")


@public_router.get("/", response_model=list[ProductResponse])
async def list_products(
    query: str | None = Query(default=None),
    db: AsyncSession = Depends(get_db)
):
    products = await ProductService.list_products(db)

    if query:
        query_words = set(query.lower().split())
        products = [p for p in products if query_words & set(p.name.lower().split())]

    return products


@public_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: int = Path(ge=1, le=MAX_INT_COLUMN),
    db: AsyncSession = Depends(get_db)
):
    product = await ProductService.get_product_by_id(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
