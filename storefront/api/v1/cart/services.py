"""
Cart service layer
Owns the cart_items table: one line per product per owner, quantities
clamped to [1, min(stock, max quantity)], and the guest-to-user merge.
"""

from typing import Optional
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, update, case, func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError

from storefront.models import CartItem, Product
from storefront.core.config import settings
from storefront.core.database import transaction
from storefront.core.exceptions import (
    NotFoundException,
    InvalidQuantityException,
    OutOfStockException,
    StorageException
)
from .schemas import CartOwner, CartLineResponse, CartResponse, CartMergeResult

def owner_clause(owner: CartOwner):
    """WHERE clause selecting the owner's cart lines"""
    if owner.user_id is not None:
        return CartItem.user_id == owner.user_id
    return CartItem.session_id == owner.session_id

# Dialects with INSERT ... ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

class CartService:
    """Shopping cart service"""

    def __init__(self, db: AsyncSession, max_quantity: Optional[int] = None):
        self.db = db
        if max_quantity is None:
            max_quantity = settings.MAX_CART_QUANTITY
        self.max_quantity = max_quantity

    def _upsert_insert(self):
        dialect = self.db.get_bind().dialect.name
        try:
            return _UPSERT_INSERTS[dialect]
        except KeyError:
            raise StorageException(f"Cart upserts are not supported on {dialect}")

    async def _product_stock(self, product_id: int):
        """
        Read a product's name and stock, share-locking the row so checkout
        cannot decrement it until this transaction ends
        """
        result = await self.db.execute(
            select(Product.id, Product.name, Product.stock_quantity)
            .where(Product.id == product_id)
            .with_for_update(read=True)
        )
        product = result.one_or_none()
        if product is None:
            raise NotFoundException(f"Product {product_id} not found")
        return product

    def _ceiling(self, product) -> int:
        ceiling = min(product.stock_quantity, self.max_quantity)
        if ceiling < 1:
            raise OutOfStockException(product.name)
        return ceiling

    async def _upsert_line(
        self,
        owner: CartOwner,
        product_id: int,
        quantity: int,
        ceiling: int
    ) -> int:
        """
        Add quantity onto the single line for (owner, product) in one statement

        A missing line is created; an existing one grows by quantity. Either
        way the result is capped at ceiling. Returns the stored quantity.
        """
        insert = self._upsert_insert()
        stmt = insert(CartItem).values(
            user_id=owner.user_id,
            session_id=owner.session_id,
            product_id=product_id,
            quantity=min(quantity, ceiling)
        )

        combined = CartItem.quantity + stmt.excluded.quantity
        new_quantity = case((combined > ceiling, ceiling), else_=combined)

        if owner.user_id is not None:
            index_elements = ["user_id", "product_id"]
            index_where = CartItem.user_id.isnot(None)
        else:
            index_elements = ["session_id", "product_id"]
            index_where = CartItem.session_id.isnot(None)

        stmt = stmt.on_conflict_do_update(
            index_elements=index_elements,
            index_where=index_where,
            set_={"quantity": new_quantity, "updated_at": func.now()}
        ).returning(CartItem.quantity)

        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def add_to_cart(self, owner: CartOwner, product_id: int, quantity: int = 1) -> int:
        """
        Add quantity of a product to the owner's cart

        Args:
            owner: Cart owner
            product_id: Product to add
            quantity: Units to add on top of what the cart already holds

        Returns:
            Quantity stored on the line, possibly reduced to stock or the cap

        Raises:
            InvalidQuantityException: If quantity is below 1
            NotFoundException: If product not found
            OutOfStockException: If the product has no stock
            StorageException: If the database write fails
        """
        if quantity < 1:
            raise InvalidQuantityException(quantity)

        async with transaction(self.db, "add item to cart"):
            product = await self._product_stock(product_id)
            stored = await self._upsert_line(
                owner, product_id, quantity, self._ceiling(product)
            )
        return stored

    async def update_quantity(self, owner: CartOwner, product_id: int, quantity: int) -> int:
        """
        Set an existing cart line to an absolute quantity

        Returns:
            Quantity stored on the line, clamped to [1, min(stock, cap)]

        Raises:
            InvalidQuantityException: If quantity is below 1
            NotFoundException: If product not found or not in the cart
            OutOfStockException: If the product has no stock
            StorageException: If the database write fails
        """
        if quantity < 1:
            raise InvalidQuantityException(quantity)

        async with transaction(self.db, "update cart item"):
            product = await self._product_stock(product_id)
            result = await self.db.execute(
                update(CartItem)
                .where(
                    owner_clause(owner),
                    CartItem.product_id == product_id
                )
                .values(quantity=min(quantity, self._ceiling(product)), updated_at=func.now())
                .returning(CartItem.quantity)
            )
            stored = result.scalar_one_or_none()
            if stored is None:
                raise NotFoundException("Cart item not found")
        return stored

    async def remove_item(self, owner: CartOwner, product_id: int) -> None:
        """Remove a product from the cart; removing an absent product is not an error"""
        async with transaction(self.db, "remove cart item"):
            await self.db.execute(
                delete(CartItem).where(
                    owner_clause(owner),
                    CartItem.product_id == product_id
                )
            )

    async def clear_cart(self, owner: CartOwner, commit: bool = True) -> None:
        """
        Clear all items from cart

        Args:
            owner: Cart owner
            commit: False to leave the delete in the caller's open transaction
        """
        stmt = delete(CartItem).where(owner_clause(owner))
        if not commit:
            await self.db.execute(stmt)
            return

        async with transaction(self.db, "clear cart"):
            await self.db.execute(stmt)

    async def get_cart_items(self, owner: CartOwner) -> CartResponse:
        """
        Get the owner's cart lines with current product details

        Lines are ordered by product name so the listing is stable.
        """
        try:
            result = await self.db.execute(
                select(
                    CartItem.id,
                    CartItem.product_id,
                    CartItem.quantity,
                    Product.name,
                    Product.price,
                    Product.image_url,
                    Product.stock_quantity
                )
                .join(Product, CartItem.product_id == Product.id)
                .where(owner_clause(owner))
                .order_by(Product.name.asc(), Product.id.asc())
            )
            rows = result.all()
        except SQLAlchemyError as e:
            raise StorageException(f"Failed to load cart: {e}") from e

        items = []
        total = Decimal("0.00")
        total_items = 0

        for row in rows:
            price = Decimal(row.price)
            subtotal = price * row.quantity
            items.append(CartLineResponse(
                id=row.id,
                product_id=row.product_id,
                quantity=row.quantity,
                product_name=row.name,
                product_price=price,
                product_image=row.image_url,
                product_stock=row.stock_quantity,
                subtotal=subtotal
            ))
            total += subtotal
            total_items += row.quantity

        return CartResponse(items=items, total_items=total_items, total=total)

    async def merge_cart(self, session_id: str, user_id: int) -> CartMergeResult:
        """
        Merge session cart into user cart on login or signup

        Every session line is added onto the user's line for the same
        product, capped at min(stock, cap), then all session lines are
        deleted. The whole merge is one transaction. Products that are out
        of stock cannot hold a line; they are removed from the user's cart
        and reported in dropped.

        Args:
            session_id: Anonymous session being folded in
            user_id: User taking over the cart

        Returns:
            Number of products merged and product ids dropped
        """
        user_owner = CartOwner.for_user(user_id)
        outcome = CartMergeResult()

        async with transaction(self.db, "merge carts"):
            result = await self.db.execute(
                select(CartItem.product_id, CartItem.quantity, Product.name, Product.stock_quantity)
                .join(Product, CartItem.product_id == Product.id)
                .where(CartItem.session_id == session_id)
                .order_by(CartItem.product_id)
                .with_for_update(of=CartItem)
            )
            session_lines = result.all()
            if not session_lines:
                return outcome

            for line in session_lines:
                ceiling = min(line.stock_quantity, self.max_quantity)
                if ceiling < 1:
                    await self.db.execute(
                        delete(CartItem).where(
                            owner_clause(user_owner),
                            CartItem.product_id == line.product_id
                        )
                    )
                    outcome.dropped.append(line.product_id)
                    continue

                await self._upsert_line(
                    user_owner, line.product_id, line.quantity, ceiling
                )
                outcome.merged += 1

            await self.db.execute(
                delete(CartItem).where(CartItem.session_id == session_id)
            )

        return outcome
