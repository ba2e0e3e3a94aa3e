"""Product model"""

from sqlalchemy import Column, String, Text, Numeric, Integer, CheckConstraint
from sqlalchemy.orm import relationship

from .base import Base, TimestampedModel

class Product(Base, TimestampedModel):
    """Catalog product with its current stock level"""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    price = Column(Numeric(10, 2), nullable=False)
    stock_quantity = Column(Integer, nullable=False, default=0)
    image_url = Column(String(500), nullable=True)

    # Relationships
    cart_items = relationship("CartItem", back_populates="product")

    __table_args__ = (
        CheckConstraint("stock_quantity >= 0", name="check_non_negative_stock"),
        CheckConstraint("price >= 0", name="check_non_negative_price"),
    )
