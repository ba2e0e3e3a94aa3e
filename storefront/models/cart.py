"""
Shopping cart model
Handles both authenticated and session-based carts
"""

from sqlalchemy import Column, String, Integer, ForeignKey, Index, CheckConstraint, text
from sqlalchemy.orm import relationship

from .base import Base, TimestampedModel

class CartItem(Base, TimestampedModel):
    """One cart line per product per owner"""

    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # User or session, never both
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    session_id = Column(String(255), nullable=True)

    # Product
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)

    # Relationships
    user = relationship("User", back_populates="cart_items")
    product = relationship("Product", back_populates="cart_items")

    # Constraints
    __table_args__ = (
        CheckConstraint("quantity > 0", name="check_positive_cart_quantity"),
        CheckConstraint(
            "(user_id IS NULL) <> (session_id IS NULL)",
            name="check_user_xor_session"
        ),
        # Partial unique indexes double as ON CONFLICT targets for upserts
        Index(
            "uq_cart_items_user_product",
            "user_id", "product_id",
            unique=True,
            postgresql_where=text("user_id IS NOT NULL"),
            sqlite_where=text("user_id IS NOT NULL"),
        ),
        Index(
            "uq_cart_items_session_product",
            "session_id", "product_id",
            unique=True,
            postgresql_where=text("session_id IS NOT NULL"),
            sqlite_where=text("session_id IS NOT NULL"),
        ),
    )
