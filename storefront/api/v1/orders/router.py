"""Order routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from storefront.core.database import get_db
from storefront.models import User
from storefront.api.v1.auth.dependencies import get_current_user
from storefront.api.v1.cart.schemas import CartOwner
from .schemas import CheckoutRequest, OrderResponse
from .services import OrderService

router = APIRouter()

@router.post(
    "/checkout",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Place order",
    description="Place an order for everything in the current user's cart"
)
async def checkout(
    payload: Optional[CheckoutRequest] = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Create order from cart"""
    service = OrderService(db)
    shipping_info = None
    if payload and payload.shipping_info:
        shipping_info = payload.shipping_info.model_dump()

    order = await service.create_order(
        CartOwner.for_user(current_user.id),
        shipping_info=shipping_info
    )
    return OrderResponse.from_order(order)

@router.get("/", response_model=List[OrderResponse])
async def list_orders(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Order history for the current user"""
    service = OrderService(db)
    orders = await service.get_user_orders(current_user.id)
    return [OrderResponse.from_order(order) for order in orders]
