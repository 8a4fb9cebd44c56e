"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    DatabaseError,

    # Product configs
    ProductConfigNotFoundError,
    InvalidProductConfigError,
    InvalidProductConstraintsError,

    # Layout
    InvalidTrimSizeError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "DatabaseError",

    # Product configs
    "ProductConfigNotFoundError",
    "InvalidProductConfigError",
    "InvalidProductConstraintsError",

    # Layout
    "InvalidTrimSizeError",
]
