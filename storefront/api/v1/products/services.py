"""
Product service layer
Read-only catalog browsing
"""

from typing import Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from storefront.models import Product
from storefront.core.exceptions import NotFoundException
from .schemas import ProductSort

# Name breaks ties so pages never overlap
_ORDERINGS = {
    ProductSort.NAME: (Product.name.asc(), Product.id.asc()),
    ProductSort.PRICE_ASC: (Product.price.asc(), Product.name.asc(), Product.id.asc()),
    ProductSort.PRICE_DESC: (Product.price.desc(), Product.name.asc(), Product.id.asc()),
    ProductSort.NEWEST: (Product.id.desc(),),
}

class ProductService:
    """Product catalog service"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_product(self, product_id: int) -> Product:
        """
        Get product details

        Raises:
            NotFoundException: If product not found
        """
        product = await self.db.get(Product, product_id)
        if not product:
            raise NotFoundException("Product not found")
        return product

    async def list_products(
        self,
        page: int = 1,
        size: int = 20,
        sort_by: ProductSort = ProductSort.NAME
    ) -> Dict[str, Any]:
        """
        List products with pagination

        Args:
            page: Page number, starting at 1
            size: Page size
            sort_by: Ordering of the whole catalog

        Returns:
            Paginated product list
        """
        total = await self.db.scalar(select(func.count(Product.id)))

        offset = (page - 1) * size
        result = await self.db.execute(
            select(Product)
            .order_by(*_ORDERINGS[sort_by])
            .offset(offset)
            .limit(size)
        )
        products = result.scalars().all()

        return {
            "items": products,
            "total": total,
            "page": page,
            "size": size,
            "pages": (total + size - 1) // size
        }
