"""Products API router"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.database import get_db
from .schemas import ProductResponse, ProductListResponse, ProductSort
from .services import ProductService

router = APIRouter()

@router.get("/", response_model=ProductListResponse)
async def list_products(
    page: int = Query(1, ge=1, description="Page number"),
    size: int = Query(20, ge=1, le=100, description="Number of items per page"),
    sort_by: ProductSort = Query(ProductSort.NAME, description="Sort by: name, price_asc, price_desc, newest"),
    db: AsyncSession = Depends(get_db)
):
    """Get products with pagination"""
    service = ProductService(db)
    listing = await service.list_products(page=page, size=size, sort_by=sort_by)
    listing["items"] = [ProductResponse.model_validate(product) for product in listing["items"]]
    return ProductListResponse(**listing)

@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Get product details"""
    service = ProductService(db)
    product = await service.get_product(product_id)
    return ProductResponse.model_validate(product)
