"""
Authentication schemas for request/response validation
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional
from datetime import datetime

from storefront.models.user import UserRole
from storefront.api.v1.cart.schemas import CartMergeResult

class SignupRequest(BaseModel):
    """User registration request"""
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    full_name: Optional[str] = Field(None, max_length=255)

    model_config = {
        "json_schema_extra": {
            "example": {
                "email": "reader@example.com",
                "password": "correct-horse-battery",
                "full_name": "Avid Reader"
            }
        }
    }

class LoginRequest(BaseModel):
    """Login with email and password"""
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=72)

class UserResponse(BaseModel):
    """User profile response"""
    id: int
    email: str
    full_name: Optional[str] = None
    role: UserRole
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class AuthResponse(BaseModel):
    """Authentication response with token and merged cart summary"""
    user: UserResponse
    access_token: str
    token_type: str = "bearer"
    cart: CartMergeResult = Field(default_factory=CartMergeResult)
