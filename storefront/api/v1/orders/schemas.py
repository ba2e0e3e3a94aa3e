"""
Order schemas for request/response validation
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal

from storefront.models import OrderStatus

class ShippingInfo(BaseModel):
    """Where the order goes"""
    full_name: str = Field(..., min_length=1, max_length=255)
    address_line1: str = Field(..., min_length=1, max_length=255)
    address_line2: Optional[str] = Field(None, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    postal_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(..., min_length=2, max_length=100)

class CheckoutRequest(BaseModel):
    """Schema for placing an order from the current cart"""
    shipping_info: Optional[ShippingInfo] = None

class OrderItemResponse(BaseModel):
    """Schema for order line response"""
    product_id: int
    product_name: Optional[str] = None
    quantity: int
    price: Decimal
    subtotal: Decimal

class OrderResponse(BaseModel):
    """Schema for order response"""
    id: int
    status: OrderStatus
    total_amount: Decimal
    shipping_info: Optional[dict] = None
    created_at: datetime
    items: List[OrderItemResponse]

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        return cls(
            id=order.id,
            status=order.status,
            total_amount=order.total_amount,
            shipping_info=order.shipping_info,
            created_at=order.created_at,
            items=[
                OrderItemResponse(
                    product_id=item.product_id,
                    product_name=item.product.name if item.product else None,
                    quantity=item.quantity,
                    price=item.price,
                    subtotal=item.subtotal
                )
                for item in order.items
            ]
        )
