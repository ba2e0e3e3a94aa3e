"""
Product schemas for catalog responses
"""

from pydantic import BaseModel, ConfigDict, computed_field
from typing import Optional, List
from decimal import Decimal
from enum import Enum

class ProductSort(str, Enum):
    NAME = "name"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    NEWEST = "newest"

class ProductResponse(BaseModel):
    """Schema for product response"""
    id: int
    name: str
    description: str
    price: Decimal
    stock_quantity: int
    image_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def in_stock(self) -> bool:
        return self.stock_quantity > 0

class ProductListResponse(BaseModel):
    """Schema for paginated product list"""
    items: List[ProductResponse]
    total: int
    page: int
    size: int
    pages: int

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "items": [],
                "total": 100,
                "page": 1,
                "size": 20,
                "pages": 5
            }
        }
    )
