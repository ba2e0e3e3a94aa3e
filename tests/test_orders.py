"""
Tests for placing orders from a cart
"""

from decimal import Decimal

import pytest

from storefront.core.exceptions import EmptyCartException, InsufficientStockException
from storefront.models import Product, OrderStatus
from storefront.api.v1.cart.services import CartService
from storefront.api.v1.orders.services import OrderService


async def stock_of(session_factory, product_id: int) -> int:
    async with session_factory() as session:
        product = await session.get(Product, product_id)
        return product.stock_quantity


class TestCreateOrder:
    """Tests for OrderService.create_order"""

    @pytest.mark.asyncio
    async def test_order_snapshots_cart(self, db, session_factory, products, user_owner):
        """Lines, prices and total come from the cart at checkout time."""
        cart = CartService(db)
        await cart.add_to_cart(user_owner, products["dune"], 2)
        await cart.add_to_cart(user_owner, products["emma"], 3)

        order = await OrderService(db).create_order(
            user_owner, shipping_info={"city": "Lisbon"}
        )

        assert order.status == OrderStatus.PENDING
        assert order.user_id == user_owner.user_id
        assert order.shipping_info == {"city": "Lisbon"}
        assert order.total_amount == Decimal("9.99") * 2 + Decimal("4.50") * 3
        lines = {item.product_id: (item.quantity, item.price) for item in order.items}
        assert lines == {
            products["dune"]: (2, Decimal("9.99")),
            products["emma"]: (3, Decimal("4.50")),
        }

    @pytest.mark.asyncio
    async def test_order_decrements_stock_and_clears_cart(self, db, session_factory, products, user_owner):
        cart = CartService(db)
        await cart.add_to_cart(user_owner, products["dune"], 2)

        await OrderService(db).create_order(user_owner)

        assert await stock_of(session_factory, products["dune"]) == 3
        assert (await cart.get_cart_items(user_owner)).items == []

    @pytest.mark.asyncio
    async def test_later_price_change_does_not_touch_order(self, db, products, user_owner):
        cart = CartService(db)
        await cart.add_to_cart(user_owner, products["emma"], 1)
        service = OrderService(db)
        order = await service.create_order(user_owner)

        product = await db.get(Product, products["emma"])
        product.price = Decimal("99.00")
        await db.commit()

        reloaded = await service.get_order(order.id)
        assert reloaded.items[0].price == Decimal("4.50")

    @pytest.mark.asyncio
    async def test_empty_cart_rejected(self, db, products, user_owner):
        with pytest.raises(EmptyCartException) as exc_info:
            await OrderService(db).create_order(user_owner)

        assert exc_info.value.error_code == "EMPTY_CART"

    @pytest.mark.asyncio
    async def test_insufficient_stock_rolls_back(self, db, session_factory, products, user_owner):
        """Stock falling under a line's quantity aborts the whole order."""
        cart = CartService(db)
        await cart.add_to_cart(user_owner, products["emma"], 2)
        await cart.add_to_cart(user_owner, products["dune"], 4)

        product = await db.get(Product, products["dune"])
        product.stock_quantity = 1
        await db.commit()

        service = OrderService(db)
        with pytest.raises(InsufficientStockException):
            await service.create_order(user_owner)

        assert await stock_of(session_factory, products["emma"]) == 200
        assert await stock_of(session_factory, products["dune"]) == 1
        assert len((await cart.get_cart_items(user_owner)).items) == 2
        assert await service.get_user_orders(user_owner.user_id) == []

    @pytest.mark.asyncio
    async def test_guest_checkout_records_session(self, db, products, guest_owner):
        cart = CartService(db)
        await cart.add_to_cart(guest_owner, products["anna"], 1)

        order = await OrderService(db).create_order(guest_owner)

        assert order.user_id is None
        assert order.session_id == guest_owner.session_id


class TestOrderHistory:
    """Tests for listing orders"""

    @pytest.mark.asyncio
    async def test_user_orders_newest_first(self, db, products, user_owner):
        cart = CartService(db)
        service = OrderService(db)

        await cart.add_to_cart(user_owner, products["emma"], 1)
        first = await service.create_order(user_owner)
        await cart.add_to_cart(user_owner, products["anna"], 1)
        second = await service.create_order(user_owner)

        orders = await service.get_user_orders(user_owner.user_id)

        assert [order.id for order in orders] == [second.id, first.id]
