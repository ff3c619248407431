"""App-wide exception hierarchy.

Every error carries a status_code and error_type for callers that map
failures to responses, plus a ``details`` dict holding the failing
arguments so callers can branch on kind and inspect values without
matching message strings.
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors.

    All custom exceptions inherit from this class and define their own
    status_code and error_type.
    """

    status_code: int = 500
    error_type: str = "internal_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.details = dict(details or {})
        super().__init__(message)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.message == other.message and self.details == other.details

    def __hash__(self) -> int:
        return hash((type(self), self.message))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, details={self.details!r})"


# Authentication errors (401)
class AuthenticationError(AppException):
    """Base class for authentication failures."""

    status_code = 401
    error_type = "authentication_error"

    def __init__(self, message: str = "Authentication failed", details=None):
        super().__init__(message, details)


# Authorization errors (403)
class AuthorizationError(AppException):
    """Base class for authorization failures."""

    status_code = 403
    error_type = "authorization_error"

    def __init__(self, message: str = "Access denied", details=None):
        super().__init__(message, details)


# Not found errors (404)
class NotFoundError(AppException):
    """Base class for resource not found errors."""

    status_code = 404
    error_type = "not_found"

    def __init__(self, message: str = "Resource not found", details=None):
        super().__init__(message, details)


# Conflict errors (409)
class ConflictError(AppException):
    """Base class for resource conflict errors."""

    status_code = 409
    error_type = "conflict"

    def __init__(self, message: str = "Resource conflict", details=None):
        super().__init__(message, details)


# Validation errors (400)
class ValidationError(AppException):
    """Base class for validation errors."""

    status_code = 400
    error_type = "validation_error"

    def __init__(self, message: str = "Validation failed", details=None):
        super().__init__(message, details)


# Configuration errors (500)
class ConfigurationError(AppException):
    """Raised when configured collaborators cannot be used as configured."""

    status_code = 500
    error_type = "configuration_error"

    def __init__(self, message: str = "Invalid configuration", details=None):
        super().__init__(message, details)


# External service errors (502)
class ExternalServiceError(AppException):
    """Base class for external service failures."""

    status_code = 502
    error_type = "external_service_error"

    def __init__(self, message: str = "External service error", details=None):
        super().__init__(message, details)


class ProviderError(ExternalServiceError):
    """Raised when an authentication provider is unreachable or misbehaves."""

    error_type = "provider_error"

    def __init__(
        self,
        message: str = "Authentication provider returned an invalid response",
        details=None,
    ):
        super().__init__(message, details)
