import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from cashier.errors import ErrorType, ERROR_STATUS_MAP

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Custom exception that services can raise."""

    error_type = ErrorType.INTERNAL_ERROR

    def __init__(self, message: str, error_type: ErrorType | None = None, details: dict[str, Any] | None = None):
        if error_type is not None:
            self.error_type = error_type
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.error_type.value, "detail": self.message, **self.details}


class ValidationError(AppException):
    """Bad input, rejected before anything is persisted."""

    error_type = ErrorType.VALIDATION


class NotFoundError(AppException):
    error_type = ErrorType.NOT_FOUND


class ProductNotFound(NotFoundError):
    error_type = ErrorType.PRODUCT_NOT_FOUND

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(
            f"product id {product_id} not found",
            details={"product_id": product_id},
        )


class ConflictError(AppException):
    error_type = ErrorType.PRODUCT_IN_USE


class InsufficientStock(ConflictError):
    error_type = ErrorType.INSUFFICIENT_STOCK

    def __init__(self, product_id: int, available: int, requested: int):
        self.product_id = product_id
        self.available = available
        self.requested = requested
        super().__init__(
            f"insufficient stock for product {product_id}: available {available}, requested {requested}",
            details={"product_id": product_id, "available": available, "requested": requested},
        )


class BusyError(AppException):
    """A row lock could not be acquired within the configured timeout."""

    error_type = ErrorType.BUSY


class PersistenceError(AppException):
    error_type = ErrorType.INTERNAL_ERROR


class UnauthorizedError(AppException):
    error_type = ErrorType.UNAUTHORIZED


async def app_exception_handler(_request: Request, exc: AppException) -> JSONResponse:
    """Global handler for AppException - converts to proper HTTP response."""
    status_code = ERROR_STATUS_MAP.get(exc.error_type, 500)
    return JSONResponse(
        status_code=status_code,
        content=exc.to_dict()
    )


async def generic_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Global handler for unhandled exceptions - returns 500."""
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={"kind": ErrorType.INTERNAL_ERROR.value, "detail": "Internal server error"}
    )
