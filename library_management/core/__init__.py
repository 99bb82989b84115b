"""Core utilities."""
from library_management.core.clock import to_naive_utc, utcnow
from library_management.core.exceptions import (
    AppException,
    ConflictError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from library_management.core.logging import get_logger, setup_logging

__all__ = [
    # Clock
    "utcnow",
    "to_naive_utc",
    # Logging
    "get_logger",
    "setup_logging",
    # Exceptions
    "AppException",
    "NotFoundError",
    "ConflictError",
    "ValidationError",
    "PersistenceError",
]
