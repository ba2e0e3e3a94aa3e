"""Models package initialization"""

from .base import Base
from .user import User, UserRole
from .product import Product
from .cart import CartItem
from .order import Order, OrderItem, OrderStatus

# Export all models
__all__ = [
    "Base",
    "User",
    "UserRole",
    "Product",
    "CartItem",
    "Order",
    "OrderItem",
    "OrderStatus",
]
