"""Error Hierarchy — typed, categorized exceptions for all BestSub failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - http_status doubles as the "code" field of the REST envelope
    - to_response() produces the {code, message, data} envelope used by every endpoint
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with BestSubError base: FastAPI global handler catches all
    - Route errors live here too so startup failures share the same logging shape
"""

from enum import Enum


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"
    CONFLICT = "conflict"


class BestSubError(Exception):
    """Base exception for all BestSub errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to the standard REST envelope."""
        return {
            "code": self.http_status,
            "message": self.message,
            "data": None,
        }


# ─── Routing Errors (startup) ───────────────────────────────────

class RouteValidationError(BestSubError):
    """Route descriptor is malformed (empty path, no handlers)."""
    def __init__(self, message: str):
        super().__init__(
            message, "ROUTE_VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.CRITICAL, 500,
        )


class RouteRegistrationError(BestSubError):
    """A handler object produced a route that failed validation."""
    def __init__(
        self, message: str, source: str, group_path: str | None = None,
    ):
        super().__init__(
            message, "ROUTE_REGISTRATION_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, 500,
        )
        self.source = source
        self.group_path = group_path


# ─── Domain Errors (400-level) ──────────────────────────────────

class AuthenticationError(BestSubError):
    """Request is missing valid credentials."""
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, 401,
        )


class InvalidCredentialsError(AuthenticationError):
    """Username/password pair (or old password) does not match."""
    def __init__(self, message: str = "Invalid username or password"):
        super().__init__(message)
        self.code = "INVALID_CREDENTIALS"


class ResourceNotFoundError(BestSubError):
    """Requested resource does not exist."""
    def __init__(self, resource_type: str, resource_id: int | str):
        super().__init__(
            f"{resource_type} not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(BestSubError):
    """Unique constraint would be violated."""
    def __init__(self, message: str):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, 409,
        )


class CronValidationError(BestSubError):
    """Cron expression is malformed."""
    def __init__(self, reason: str):
        super().__init__(
            f"Invalid cron expression: {reason}",
            "INVALID_CRON", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, 400,
        )
        self.reason = reason


class InvalidSubscriptionURLError(BestSubError):
    """Subscription URL is not an absolute http(s) URL."""
    def __init__(self, url: str):
        super().__init__(
            "Invalid subscription URL", "INVALID_SUBSCRIPTION_URL",
            ErrorCategory.VALIDATION, ErrorSeverity.WARNING, 400,
        )
        self.url = url


class ContentNotFoundError(BestSubError):
    """No cached content for the subscription."""
    def __init__(self, sub_id: int):
        super().__init__(
            "Subscription content not found", "CONTENT_NOT_FOUND",
            ErrorCategory.RESOURCE_NOT_FOUND, ErrorSeverity.WARNING, 404,
        )
        self.sub_id = sub_id


# ─── Infrastructure Errors (500-level) ──────────────────────────

class FetchFailedError(BestSubError):
    """Remote subscription URL could not be fetched."""
    def __init__(self, reason: str):
        super().__init__(
            "Failed to fetch subscription data", "FETCH_FAILED",
            ErrorCategory.EXTERNAL_API, ErrorSeverity.ERROR, 503,
        )
        self.reason = reason


class DatabaseError(BestSubError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, 503,
        )
        self.operation = operation
