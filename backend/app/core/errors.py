"""Error Hierarchy — typed, categorized exceptions for the HTTP boundary and infrastructure.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Claim failures (400-level) are recoverable; infrastructure errors are critical
    - to_response() produces the REST envelope: {"error": {code, message}} only
    - category and severity drive logging and status choice; they never reach the client
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with NicknameServiceError base: FastAPI global handler catches all
      (ADR: uniform error shape)
    - Expected claim failures travel as ClaimRejected values; ClaimError only
      exists at the route boundary to reach the global handler
    - TransactionConflictError is retryable and never reaches a caller directly
"""

from enum import Enum

from app.core.claim_outcome import ClaimRejected
from app.core.domain_types import ClaimErrorKind


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


class NicknameServiceError(Exception):
    """Base exception for all nickname service errors."""

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
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
            }
        }


# ─── Claim Errors (route boundary) ──────────────────────────────

# kind → (code, category, severity, http_status)
_CLAIM_ERROR_SHAPES: dict[ClaimErrorKind, tuple[str, ErrorCategory, ErrorSeverity, int]] = {
    ClaimErrorKind.UNAUTHENTICATED: (
        "UNAUTHENTICATED", ErrorCategory.AUTHENTICATION, ErrorSeverity.WARNING, 401,
    ),
    ClaimErrorKind.INVALID_ARGUMENT: (
        "INVALID_ARGUMENT", ErrorCategory.VALIDATION, ErrorSeverity.WARNING, 400,
    ),
    ClaimErrorKind.ALREADY_EXISTS: (
        "ALREADY_EXISTS", ErrorCategory.CONFLICT, ErrorSeverity.INFO, 409,
    ),
    ClaimErrorKind.FAILED_PRECONDITION: (
        "FAILED_PRECONDITION", ErrorCategory.BUSINESS_RULE, ErrorSeverity.INFO, 400,
    ),
    ClaimErrorKind.INTERNAL: (
        "INTERNAL", ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL, 500,
    ),
}


class ClaimError(NicknameServiceError):
    """A rejected claim surfaced through the HTTP error envelope."""
    def __init__(self, rejection: ClaimRejected):
        code, category, severity, http_status = _CLAIM_ERROR_SHAPES[rejection.kind]
        super().__init__(
            rejection.message, code, category, severity, http_status,
        )
        self.kind = rejection.kind


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(NicknameServiceError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, 503,
        )
        self.operation = operation


class TransactionConflictError(NicknameServiceError):
    """Concurrent modification detected; the transaction may be re-run."""
    def __init__(self, message: str):
        super().__init__(
            message, "TRANSACTION_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, 409,
        )
