"""
Authentication service layer
Handles signup and login, and hands a guest's cart over to the account
"""

from typing import Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import logging

from storefront.models import User
from storefront.core.security import SecurityUtils
from storefront.core.exceptions import (
    UnauthorizedException,
    DuplicateResourceException,
    StorageException
)
from storefront.api.v1.cart.schemas import CartMergeResult
from storefront.api.v1.cart.services import CartService
from .schemas import SignupRequest, LoginRequest

logger = logging.getLogger(__name__)

class AuthService:
    """Authentication service"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.cart_service = CartService(db)

    @staticmethod
    def generate_token(user: User) -> str:
        return SecurityUtils.create_access_token({
            "sub": str(user.id),
            "email": user.email,
            "role": user.role.value if user.role else None
        })

    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.email == email.lower())
        )
        return result.scalar_one_or_none()

    async def _merge_guest_cart(
        self,
        session_id: Optional[str],
        user: User,
        tolerate_failure: bool = False
    ) -> Optional[CartMergeResult]:
        """
        Fold the session cart into the user's cart

        With tolerate_failure a storage error is logged and None returned;
        the guest lines then stay under the session for a later login.
        """
        if not session_id:
            return CartMergeResult()

        user_id = user.id
        try:
            outcome = await self.cart_service.merge_cart(session_id=session_id, user_id=user_id)
        except StorageException as e:
            if not tolerate_failure:
                raise
            logger.error(f"Guest cart merge failed for user {user_id}: {e.detail}")
            # Rollback expired the user
            await self.db.refresh(user)
            return None

        if outcome.merged or outcome.dropped:
            logger.info(
                f"Merged guest cart into user {user_id}: "
                f"{outcome.merged} merged, {len(outcome.dropped)} dropped"
            )
        return outcome

    async def signup(
        self,
        request: SignupRequest,
        session_id: Optional[str] = None
    ) -> Tuple[User, Optional[CartMergeResult]]:
        """
        Register new user and adopt the guest cart

        The merge outcome is None when the account was created but the
        guest cart could not be merged.

        Raises:
            DuplicateResourceException: If email already registered
        """
        email = request.email.lower()
        if await self.get_user_by_email(email):
            raise DuplicateResourceException("User", "email", email)

        user = User(
            email=email,
            password_hash=SecurityUtils.hash_password(request.password),
            full_name=request.full_name
        )
        self.db.add(user)

        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise DuplicateResourceException("User", "email", email) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StorageException(f"Failed to create user: {e}") from e

        await self.db.refresh(user)
        logger.info(f"New user registered: {user.id}")

        # The account is committed; a failed merge must not fail the signup
        outcome = await self._merge_guest_cart(session_id, user, tolerate_failure=True)
        return user, outcome

    async def login(
        self,
        request: LoginRequest,
        session_id: Optional[str] = None
    ) -> Tuple[User, CartMergeResult]:
        """
        Authenticate user and adopt the guest cart

        Raises:
            UnauthorizedException: If credentials are wrong or account inactive
        """
        user = await self.get_user_by_email(request.email)

        if not user or not SecurityUtils.verify_password(request.password, user.password_hash):
            raise UnauthorizedException("Invalid email or password")

        if not user.is_active:
            raise UnauthorizedException("Account is inactive")

        outcome = await self._merge_guest_cart(session_id, user)
        return user, outcome
