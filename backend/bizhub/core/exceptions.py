"""
Typed exceptions for the order core.

Every error carries a machine-readable ``code`` and the HTTP status it maps
to, so the API layer renders one envelope for all of them:

    BizhubError
    +-- ValidationError          400
    |   +-- InvalidStatusTransition
    +-- ConflictError            400
    |   +-- DuplicateResource
    |   +-- InsufficientStock
    +-- AuthenticationRequired   401
    +-- AccessDenied             403
    +-- NotFound                 404
    +-- InternalError            500
"""

from typing import List, Optional


class BizhubError(Exception):
    code: str = "BIZHUB_ERROR"
    status_code: int = 500
    default_message: str = "Unexpected error"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[str]] = None):
        self.message = message or self.default_message
        self.errors = errors or []
        super().__init__(self.message)


class ValidationError(BizhubError):
    code = "VALIDATION_ERROR"
    status_code = 400
    default_message = "Validation failed"


class InvalidStatusTransition(ValidationError):
    code = "INVALID_STATUS_TRANSITION"

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change order status from {current} to {requested}")


class ConflictError(BizhubError):
    code = "CONFLICT"
    status_code = 400
    default_message = "Resource conflict"


class DuplicateResource(ConflictError):
    code = "DUPLICATE_RESOURCE"

    def __init__(self, resource: str, field: str, value):
        self.resource = resource
        self.field = field
        self.value = value
        super().__init__(f"{resource} with {field} '{value}' already exists in your company")


class InsufficientStock(ConflictError):
    code = "INSUFFICIENT_STOCK"

    def __init__(self, product_name: str, available: int, requested: int):
        self.product_name = product_name
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for \"{product_name}\": available {available}, requested {requested}"
        )


class AuthenticationRequired(BizhubError):
    code = "AUTHENTICATION_REQUIRED"
    status_code = 401
    default_message = "Authentication required. Please login first."


class AccessDenied(BizhubError):
    code = "ACCESS_DENIED"
    status_code = 403
    default_message = "Access denied"


class NotFound(BizhubError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Resource not found"


class InternalError(BizhubError):
    code = "INTERNAL_ERROR"
    status_code = 500
    default_message = "Internal server error"
