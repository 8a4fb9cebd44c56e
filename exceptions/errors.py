"""
Custom exception classes for the application.

All errors carry a code, an HTTP status and a details dict so routes
can return the same error envelope everywhere.
"""

from typing import Optional, Any
from datetime import datetime


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "PRODUCT_CONFIG_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.utcnow().isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class DatabaseError(AppError):
    """Database operation failed (500)."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="DATABASE_ERROR",
            message=f"Database {operation} failed: {message}",
            status_code=500,
            details={"operation": operation, **(details or {})}
        )


# ===================
# PRODUCT CONFIG ERRORS
# ===================

class ProductConfigNotFoundError(NotFoundError):
    """No active configuration stored for the product."""

    def __init__(self, product_id: int):
        super().__init__(
            resource="Product config",
            identifier=str(product_id),
            code="PRODUCT_CONFIG_NOT_FOUND"
        )


class InvalidProductConfigError(ValidationError):
    """A stored product_configs column can't be parsed."""

    def __init__(
        self,
        product_id: int,
        column: str,
        reason: str,
        code: str = "INVALID_PRODUCT_CONFIG"
    ):
        super().__init__(
            code=code,
            message=f"Stored product config column '{column}' is invalid",
            details={"product_id": product_id, "column": column, "reason": reason}
        )


class InvalidProductConstraintsError(InvalidProductConfigError):
    """Stored constraints JSON can't be parsed."""

    def __init__(self, product_id: int, reason: str):
        super().__init__(
            product_id,
            "constraints",
            reason,
            code="INVALID_PRODUCT_CONSTRAINTS"
        )


# ===================
# LAYOUT ERRORS
# ===================

class InvalidTrimSizeError(ValidationError):
    """Trim size missing or not positive."""

    def __init__(self, width: Optional[float] = None, height: Optional[float] = None):
        super().__init__(
            code="INVALID_TRIM_SIZE",
            message="Trim size must have positive width and height",
            details={"width": width, "height": height}
        )
