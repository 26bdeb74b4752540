# storefront/domain/errors.py
from typing import Any, Dict


class AppError(Exception):
    """
    Base for every error the service raises on purpose.
    code -> stable identifier callers can branch on
    status_code -> HTTP status the api layer renders
    """

    code = "APP_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message, "details": self.details}


class ValidationError(AppError):
    code = "VALIDATION"
    status_code = 400


class InsufficientStockError(ValidationError):
    code = "INSUFFICIENT_STOCK"

    def __init__(self, available: int, requested: int, in_cart: int = 0):
        if in_cart:
            message = (
                f"Insufficient stock. Available: {available}, "
                f"in cart: {in_cart}, requested: {requested}"
            )
        else:
            message = f"Insufficient stock. Available: {available}, requested: {requested}"
        super().__init__(
            message,
            {"available": available, "requested": requested, "in_cart": in_cart},
        )


class NotFoundError(AppError):
    code = "NOT_FOUND"
    status_code = 404


class ConflictError(AppError):
    code = "CONFLICT"
    status_code = 409


class SyncInProgressError(ConflictError):
    code = "SYNC_IN_PROGRESS"

    def __init__(self):
        super().__init__("Synchronization already in progress")


class UnauthorizedError(AppError):
    code = "UNAUTHORIZED"
    status_code = 401


class ForbiddenError(AppError):
    code = "FORBIDDEN"
    status_code = 403


class UpstreamError(AppError):
    code = "UPSTREAM"
    status_code = 502


class SyncAbortedError(UpstreamError):
    """Run stopped by a catalog failure; counts are what was completed before it."""

    code = "SYNC_ABORTED"

    def __init__(self, message: str, synchronized: int, errors: int):
        super().__init__(message, {"synchronized": synchronized, "errors": errors})
        self.synchronized = synchronized
        self.errors = errors


class InternalError(AppError):
    code = "INTERNAL"
    status_code = 500
