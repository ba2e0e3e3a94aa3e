"""Order model"""

from sqlalchemy import Column, String, Numeric, Integer, Enum, ForeignKey, JSON, CheckConstraint
from sqlalchemy.orm import relationship
import enum

from .base import Base, TimestampedModel

class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

class Order(Base, TimestampedModel):
    """Order placed from one owner's cart"""

    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Parties
    session_id = Column(String(255), nullable=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    # Status and amounts
    status = Column(Enum(OrderStatus), default=OrderStatus.PENDING, nullable=False, index=True)
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)

    # Shipping
    shipping_info = Column(JSON, nullable=True)

    # Relationships
    user = relationship("User", back_populates="orders")
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id"
    )

class OrderItem(Base):
    """Order line with the unit price at the time of purchase"""

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)

    # Relationships
    order = relationship("Order", back_populates="items")
    product = relationship("Product")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="check_positive_order_quantity"),
    )

    @property
    def subtotal(self):
        return self.price * self.quantity
