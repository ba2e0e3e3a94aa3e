"""
Order service layer
Turns a cart into an order in a single transaction
"""

from typing import List, Optional, Dict, Any
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from sqlalchemy.orm import selectinload
import logging

from storefront.models import Order, OrderItem, OrderStatus, Product, CartItem
from storefront.core.database import transaction
from storefront.core.exceptions import (
    NotFoundException,
    EmptyCartException,
    InsufficientStockException
)
from storefront.api.v1.cart.schemas import CartOwner
from storefront.api.v1.cart.services import CartService, owner_clause

logger = logging.getLogger(__name__)

class OrderService:
    """Order service for business logic"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.cart_service = CartService(db)

    async def create_order(
        self,
        owner: CartOwner,
        shipping_info: Optional[Dict[str, Any]] = None
    ) -> Order:
        """
        Create order from the owner's cart

        Prices are snapshotted onto the order lines, stock is decremented and
        the cart is cleared, all in one transaction.

        Args:
            owner: Cart owner placing the order
            shipping_info: Delivery details stored with the order

        Returns:
            Created order with its items

        Raises:
            EmptyCartException: If the cart has no lines
            InsufficientStockException: If stock dropped below a line's quantity
        """
        async with transaction(self.db, "create order"):
            result = await self.db.execute(
                select(
                    CartItem.product_id,
                    CartItem.quantity,
                    Product.name,
                    Product.price,
                    Product.stock_quantity
                )
                .join(Product, CartItem.product_id == Product.id)
                .where(owner_clause(owner))
                .order_by(CartItem.product_id)
                .with_for_update(of=Product)
            )
            lines = result.all()

            if not lines:
                raise EmptyCartException()

            total = Decimal("0.00")
            order = Order(
                user_id=owner.user_id,
                session_id=owner.session_id,
                status=OrderStatus.PENDING,
                shipping_info=shipping_info
            )

            for line in lines:
                if line.quantity > line.stock_quantity:
                    raise InsufficientStockException(line.name, line.stock_quantity)

                price = Decimal(line.price)
                total += price * line.quantity
                order.items.append(OrderItem(
                    product_id=line.product_id,
                    quantity=line.quantity,
                    price=price
                ))

                await self.db.execute(
                    update(Product)
                    .where(Product.id == line.product_id)
                    .values(stock_quantity=Product.stock_quantity - line.quantity)
                )

            order.total_amount = total
            self.db.add(order)

            await self.cart_service.clear_cart(owner, commit=False)
            await self.db.flush()
            order_id = order.id

        logger.info(f"Order {order_id} placed: {len(lines)} lines, total {total}")
        return await self.get_order(order_id)

    async def get_order(self, order_id: int) -> Order:
        """Get order with items and their products"""
        result = await self.db.execute(
            select(Order)
            .options(selectinload(Order.items).selectinload(OrderItem.product))
            .where(Order.id == order_id)
            .execution_options(populate_existing=True)
        )
        order = result.scalar_one_or_none()
        if not order:
            raise NotFoundException("Order not found")
        return order

    async def get_user_orders(self, user_id: int) -> List[Order]:
        """Get user's orders, newest first"""
        result = await self.db.execute(
            select(Order)
            .options(selectinload(Order.items).selectinload(OrderItem.product))
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        return list(result.scalars().all())
