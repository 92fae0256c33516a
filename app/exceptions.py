from typing import Any, Mapping, Optional


class AppError(Exception):
    """Base class for errors raised by the service layer.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (field errors, conflicting keys)
        code: machine-readable error code
        http_status: suggested HTTP status code for handlers
    """

    http_status = 500
    default_message = "Application error"
    default_code = "APPLICATION_ERROR"

    def __init__(self, message: Optional[str] = None, details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code or self.default_code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = dict(self.details)
        return payload

    def __str__(self) -> str:
        return self.message


class ServiceValidationError(AppError):
    """Raised when input data is invalid or a precondition for a service call is not met.

    Always raised before any store call is issued.
    """

    http_status = 400
    default_message = "Invalid input"
    default_code = "SERVICE_VALIDATION_ERROR"


class NotFoundError(AppError):
    """Raised when a requested resource was not found."""

    http_status = 404
    default_message = "Not found"
    default_code = "NOT_FOUND"


class ConflictError(AppError):
    """Raised when a write collides with an existing record (e.g., duplicate entry)."""

    http_status = 409
    default_message = "Conflict"
    default_code = "CONFLICT"


class StaleDataError(AppError):
    """Raised when an optimistic check fails: the targeted records changed since
    the caller last read them.

    Callers must discard their in-progress edit and re-fetch; retrying the same
    request is never correct.
    """

    http_status = 409
    default_message = "Data was changed by someone else. Reload and try again."
    default_code = "STALE_DATA"


class StoreUnavailableError(AppError):
    """Raised when the backing store fails for reasons other than a conflict.

    Nothing was applied; re-submitting the same full-state request is safe.
    """

    http_status = 503
    default_message = "Registration store is unavailable"
    default_code = "STORE_UNAVAILABLE"


class UnauthorizedError(AppError):
    """Raised when the calling actor cannot be identified."""

    http_status = 401
    default_message = "Unauthorized"
    default_code = "UNAUTHORIZED"
