"""
Custom exception classes and error handlers
Provides consistent error responses across the application
"""

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)

class StorefrontException(HTTPException):
    """Base exception class for the storefront application"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code

class BadRequestException(StorefrontException):
    """400 Bad Request"""

    def __init__(self, detail: str, error_code: str = "BAD_REQUEST"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code
        )

class UnauthorizedException(StorefrontException):
    """401 Unauthorized"""

    def __init__(self, detail: str = "Unauthorized", error_code: str = "UNAUTHORIZED"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code=error_code,
            headers={"WWW-Authenticate": "Bearer"}
        )

class NotFoundException(StorefrontException):
    """404 Not Found"""

    def __init__(self, detail: str = "Not found", error_code: str = "NOT_FOUND"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code=error_code
        )

class ConflictException(StorefrontException):
    """409 Conflict"""

    def __init__(self, detail: str, error_code: str = "CONFLICT"):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            error_code=error_code
        )

class InternalServerException(StorefrontException):
    """500 Internal Server Error"""

    def __init__(
        self,
        detail: str = "Internal server error",
        error_code: str = "INTERNAL_ERROR"
    ):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            error_code=error_code
        )

# Business logic exceptions
class InvalidQuantityException(BadRequestException):
    """Quantity outside the accepted range"""

    def __init__(self, quantity: int):
        super().__init__(
            detail=f"Quantity must be at least 1, got {quantity}",
            error_code="INVALID_QUANTITY"
        )

class OutOfStockException(BadRequestException):
    """Product has no stock left to put in a cart"""

    def __init__(self, product_name: str):
        super().__init__(
            detail=f"{product_name} is out of stock",
            error_code="OUT_OF_STOCK"
        )

class InsufficientStockException(BadRequestException):
    """Product stock insufficient"""

    def __init__(self, product_name: str, available: int):
        super().__init__(
            detail=f"Insufficient stock for {product_name}. Only {available} available.",
            error_code="INSUFFICIENT_STOCK"
        )

class EmptyCartException(BadRequestException):
    """Checkout attempted with nothing in the cart"""

    def __init__(self, detail: str = "Cart is empty"):
        super().__init__(detail=detail, error_code="EMPTY_CART")

class DuplicateResourceException(ConflictException):
    """Resource already exists"""

    def __init__(self, resource: str, field: str, value: str):
        super().__init__(
            detail=f"{resource} with {field} '{value}' already exists",
            error_code="DUPLICATE_RESOURCE"
        )

class StorageException(InternalServerException):
    """The relational store failed (connection loss, constraint violation)"""

    def __init__(self, detail: str = "Storage operation failed"):
        super().__init__(detail=detail, error_code="STORAGE_ERROR")

async def storefront_exception_handler(request: Request, exc: StorefrontException) -> JSONResponse:
    """Render application exceptions as a uniform error envelope"""
    if isinstance(exc, StorageException):
        logger.error(f"Storage failure on {request.method} {request.url.path}: {exc.detail}", exc_info=exc.__cause__)

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "code": exc.error_code,
                "message": exc.detail
            }
        },
        headers=exc.headers,
    )

def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontException, storefront_exception_handler)
