"""
Cart schemas for request/response validation
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, List
from decimal import Decimal

MAX_LINE_QUANTITY = 99

class CartOwner(BaseModel):
    """Whose cart a line belongs to: a logged-in user or an anonymous session"""
    user_id: Optional[int] = None
    session_id: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_exactly_one(self) -> "CartOwner":
        if (self.user_id is None) == (self.session_id is None):
            raise ValueError("Exactly one of user_id or session_id is required")
        return self

    @classmethod
    def for_user(cls, user_id: int) -> "CartOwner":
        return cls(user_id=user_id)

    @classmethod
    def for_session(cls, session_id: str) -> "CartOwner":
        return cls(session_id=session_id)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

class CartItemCreate(BaseModel):
    """Schema for adding item to cart"""
    product_id: int = Field(..., gt=0)
    quantity: int = Field(1, ge=1, le=MAX_LINE_QUANTITY)

class CartItemUpdate(BaseModel):
    """Schema for updating cart item"""
    quantity: int = Field(..., ge=1, le=MAX_LINE_QUANTITY)

class CartLineResponse(BaseModel):
    """Schema for cart line response"""
    id: int
    product_id: int
    quantity: int

    # Product details
    product_name: str
    product_price: Decimal
    product_image: Optional[str] = None
    product_stock: int

    # Calculated fields
    subtotal: Decimal

class CartResponse(BaseModel):
    """Schema for complete cart response"""
    items: List[CartLineResponse]
    total_items: int
    total: Decimal

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "items": [],
                "total_items": 0,
                "total": "0.00"
            }
        }
    )

    @classmethod
    def empty(cls) -> "CartResponse":
        return cls(items=[], total_items=0, total=Decimal("0.00"))

class CartWriteResponse(BaseModel):
    """Result of an add or update: the quantity actually stored"""
    message: str
    product_id: int
    quantity: int

class CartMergeResult(BaseModel):
    """Outcome of folding an anonymous cart into a user's cart"""
    merged: int = 0
    dropped: List[int] = Field(default_factory=list)
