"""Cart routes for both authenticated and session-based carts"""

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import logging

from storefront.core.database import get_db
from storefront.core.exceptions import BadRequestException
from storefront.core.session import SessionService, get_session_service
from storefront.models import User
from storefront.api.v1.auth.dependencies import (
    get_current_user,
    get_cart_owner,
    get_or_create_cart_owner
)
from .schemas import (
    CartOwner,
    CartItemCreate,
    CartItemUpdate,
    CartResponse,
    CartWriteResponse,
    CartMergeResult
)
from .services import CartService

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/", response_model=CartResponse)
async def get_cart(
    owner: Optional[CartOwner] = Depends(get_cart_owner),
    db: AsyncSession = Depends(get_db)
):
    """Get cart (supports both authenticated and session-based)"""
    if owner is None:
        return CartResponse.empty()

    service = CartService(db)
    return await service.get_cart_items(owner)

@router.post("/add", response_model=CartWriteResponse)
async def add_to_cart(
    item_data: CartItemCreate,
    owner: CartOwner = Depends(get_or_create_cart_owner),
    db: AsyncSession = Depends(get_db)
):
    """Add item to cart"""
    service = CartService(db)
    quantity = await service.add_to_cart(owner, item_data.product_id, item_data.quantity)

    return CartWriteResponse(
        message="Item added to cart",
        product_id=item_data.product_id,
        quantity=quantity
    )

@router.put("/items/{product_id}", response_model=CartWriteResponse)
async def update_cart_item(
    product_id: int,
    update_data: CartItemUpdate,
    owner: Optional[CartOwner] = Depends(get_cart_owner),
    db: AsyncSession = Depends(get_db)
):
    """Update cart item quantity"""
    if owner is None:
        raise BadRequestException("No cart for this visitor", error_code="NO_CART")

    service = CartService(db)
    quantity = await service.update_quantity(owner, product_id, update_data.quantity)

    return CartWriteResponse(
        message="Cart updated",
        product_id=product_id,
        quantity=quantity
    )

@router.delete("/items/{product_id}")
async def remove_from_cart(
    product_id: int,
    owner: Optional[CartOwner] = Depends(get_cart_owner),
    db: AsyncSession = Depends(get_db)
):
    """Remove item from cart"""
    if owner is not None:
        service = CartService(db)
        await service.remove_item(owner, product_id)

    return {"message": "Item removed from cart"}

@router.post("/clear")
async def clear_cart(
    owner: Optional[CartOwner] = Depends(get_cart_owner),
    db: AsyncSession = Depends(get_db)
):
    """Clear entire cart"""
    if owner is not None:
        service = CartService(db)
        await service.clear_cart(owner)

    return {"message": "Cart cleared"}

@router.post("/merge", response_model=CartMergeResult)
async def merge_carts(
    request: Request,
    response: Response,
    current_user: User = Depends(get_current_user),
    sessions: SessionService = Depends(get_session_service),
    db: AsyncSession = Depends(get_db)
):
    """Merge session cart with user cart after login"""
    session_id = sessions.get_session_id(request)
    if not session_id:
        return CartMergeResult()

    service = CartService(db)
    outcome = await service.merge_cart(session_id=session_id, user_id=current_user.id)
    sessions.clear(response)

    logger.info(f"Merged {outcome.merged} cart lines into user {current_user.id}")
    return outcome
