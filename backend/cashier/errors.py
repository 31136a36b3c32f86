from enum import Enum


class ErrorType(Enum):
    VALIDATION = "validation_error"
    NOT_FOUND = "not_found"
    PRODUCT_NOT_FOUND = "product_not_found"
    INSUFFICIENT_STOCK = "insufficient_stock"
    PRODUCT_IN_USE = "product_in_use"
    BUSY = "busy"
    UNAUTHORIZED = "unauthorized"
    INTERNAL_ERROR = "internal"


# Map error types to HTTP status codes
ERROR_STATUS_MAP = {
    ErrorType.VALIDATION: 400,
    ErrorType.NOT_FOUND: 404,
    ErrorType.PRODUCT_NOT_FOUND: 404,
    ErrorType.INSUFFICIENT_STOCK: 409,
    ErrorType.PRODUCT_IN_USE: 409,
    ErrorType.BUSY: 503,
    ErrorType.UNAUTHORIZED: 401,
    ErrorType.INTERNAL_ERROR: 500,
}
