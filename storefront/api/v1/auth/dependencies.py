"""
Authentication dependencies and utilities
"""

from typing import Optional
from fastapi import Depends, Request, Response
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from storefront.core.database import get_db
from storefront.core.exceptions import UnauthorizedException, StorefrontException
from storefront.core.security import SecurityUtils
from storefront.core.session import SessionService, get_session_service
from storefront.models import User
from storefront.api.v1.cart.schemas import CartOwner

security = HTTPBearer(auto_error=False)

async def _load_user(token: str, db: AsyncSession) -> User:
    payload = SecurityUtils.decode_token(token)

    if payload.get("type") != "access":
        raise UnauthorizedException("Invalid token type")

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise UnauthorizedException("Invalid authentication credentials")

    result = await db.execute(
        select(User).where(User.id == user_id, User.is_active == True)
    )
    user = result.scalar_one_or_none()
    if user is None:
        raise UnauthorizedException("User not found or inactive")
    return user

async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """
    Get current user if authenticated, otherwise None
    Useful for endpoints that work for both authenticated and anonymous users
    """
    if not credentials:
        return None

    try:
        return await _load_user(credentials.credentials, db)
    except StorefrontException:
        return None

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Get current authenticated user (required)
    Raises 401 if not authenticated or user not found
    """
    if not credentials:
        raise UnauthorizedException("Not authenticated")
    return await _load_user(credentials.credentials, db)

async def get_cart_owner(
    request: Request,
    current_user: Optional[User] = Depends(get_current_user_optional),
    sessions: SessionService = Depends(get_session_service)
) -> Optional[CartOwner]:
    """Cart owner for the request, or None for a visitor with no session yet"""
    if current_user:
        return CartOwner.for_user(current_user.id)

    session_id = sessions.get_session_id(request)
    if session_id:
        return CartOwner.for_session(session_id)
    return None

async def get_or_create_cart_owner(
    request: Request,
    response: Response,
    current_user: Optional[User] = Depends(get_current_user_optional),
    sessions: SessionService = Depends(get_session_service)
) -> CartOwner:
    """Cart owner for the request, issuing an anonymous session when needed"""
    if current_user:
        return CartOwner.for_user(current_user.id)
    return CartOwner.for_session(sessions.ensure_session_id(request, response))
