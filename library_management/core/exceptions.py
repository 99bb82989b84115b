"""Custom exceptions for the application."""
from typing import Any, Optional


class AppException(Exception):
    """Base application exception."""

    status_code: int = 400

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """Referenced library, book, member or loan does not exist."""

    status_code = 404

    def __init__(self, resource: str, resource_id: Any):
        super().__init__(
            f"{resource} with id {resource_id} not found",
            error_code="NOT_FOUND",
            details={"resource": resource, "id": resource_id},
        )
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(AppException):
    """Request would break a loan or availability invariant."""

    status_code = 409

    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None):
        super().__init__(reason, error_code="CONFLICT", details=details)
        self.reason = reason


class ValidationError(AppException):
    """Validation errors."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message,
            error_code="VALIDATION_ERROR",
            details={"field": field} if field else {},
        )
        self.field = field


class PersistenceError(AppException):
    """Storage failures not otherwise classified."""

    def __init__(self, message: str, transient: bool = False):
        super().__init__(
            message,
            error_code="PERSISTENCE_ERROR",
            details={"transient": transient},
        )
        self.transient = transient
        self.status_code = 503 if transient else 500
