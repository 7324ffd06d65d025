# =============================================================================
# Application errors
# =============================================================================
# Raised by services, turned into JSON responses by the handlers in app.py
# =============================================================================

from typing import Any, Dict, Optional


class AppError(Exception):
    """
    Base error for the production backend.

    Every service-level error extends this class; the error handler
    registered in create_app() renders it as JSON with ``status_code``.
    """
    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, extra: Optional[Dict[str, Any]] = None):
        self.message = message or self.__class__.message
        self.extra = extra or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            **self.extra,
        }


# =============================================================================
# HTTP-level errors
# =============================================================================

class ValidationError(AppError):
    """Invalid input or a disallowed state change (400)."""
    status_code = 400
    code = "VALIDATION_ERROR"
    message = "Validation error"


class UnauthorizedError(AppError):
    """Caller identity missing or unknown (401)."""
    status_code = 401
    code = "UNAUTHORIZED"
    message = "Authentication required"


class NotFoundError(AppError):
    """Resource absent or soft-deleted (404)."""
    status_code = 404
    code = "NOT_FOUND"
    message = "Resource not found"


class ConflictError(AppError):
    """Write collided with the current database state (409)."""
    status_code = 409
    code = "CONFLICT"
    message = "Conflict with the current state of the resource"


class InternalError(AppError):
    """Database or rendering failure; details stay in the server log."""
    status_code = 500
    code = "INTERNAL_ERROR"
    message = "Internal server error"


# =============================================================================
# Domain errors
# =============================================================================

class OrderNotFoundError(NotFoundError):
    code = "ORDER_NOT_FOUND"
    message = "Order not found"


class InvalidWorkerError(ValidationError):
    code = "INVALID_WORKER"
    message = "Invalid worker"


class InvalidProductsError(ValidationError):
    code = "INVALID_PRODUCTS"
    message = "One or more products are invalid"
