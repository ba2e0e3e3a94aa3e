"""
Authentication API routes
"""

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.database import get_db
from storefront.core.session import SessionService, get_session_service
from storefront.models import User
from storefront.api.v1.cart.schemas import CartMergeResult
from .dependencies import get_current_user
from .schemas import SignupRequest, LoginRequest, AuthResponse, UserResponse
from .services import AuthService

router = APIRouter()

@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
    description="Create an account and move the visitor's cart into it"
)
async def signup(
    payload: SignupRequest,
    request: Request,
    response: Response,
    sessions: SessionService = Depends(get_session_service),
    db: AsyncSession = Depends(get_db)
):
    """Register new user"""
    service = AuthService(db)
    session_id = sessions.get_session_id(request)

    user, outcome = await service.signup(payload, session_id=session_id)
    if session_id and outcome is not None:
        sessions.clear(response)

    return AuthResponse(
        user=UserResponse.model_validate(user),
        access_token=service.generate_token(user),
        cart=outcome or CartMergeResult()
    )

@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login user",
    description="Login with email and password and move the visitor's cart into the account"
)
async def login(
    payload: LoginRequest,
    request: Request,
    response: Response,
    sessions: SessionService = Depends(get_session_service),
    db: AsyncSession = Depends(get_db)
):
    """Login user"""
    service = AuthService(db)
    session_id = sessions.get_session_id(request)

    user, outcome = await service.login(payload, session_id=session_id)
    if session_id:
        sessions.clear(response)

    return AuthResponse(
        user=UserResponse.model_validate(user),
        access_token=service.generate_token(user),
        cart=outcome
    )

@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    """Current user profile"""
    return current_user
