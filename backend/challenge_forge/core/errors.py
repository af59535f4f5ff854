"""Error Hierarchy — typed, categorized exceptions for all ChallengeForge failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) ask the caller to act; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages
    - The JSON-shaped extraction path never raises any of these to its caller —
      malformed structure, cardinality and type mismatches become DegradationInfo warnings

Design Decisions:
    - Single hierarchy with ChallengeForgeError base: FastAPI global handler catches all
      (ADR: uniform error shape)
    - Label-shaped refusals are 422: the request was fine, the generated text was not,
      and the caller should regenerate (ADR: never guess the answer to a question)
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone

from challenge_forge.core.domain_types import RecordKind


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    GENERATED_CONTENT = "generated_content"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    record_kind: str | None = None
    record_id: str | None = None
    retry_after_ms: int | None = None


class ChallengeForgeError(Exception):
    """Base exception for all ChallengeForge errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "record_kind": self.context.record_kind,
                    "record_id": self.context.record_id,
                    "retry_after_ms": self.context.retry_after_ms,
                },
            }
        }


# ─── Generated-content refusals (label-shaped path, 422) ────────

def _mcq_context() -> ErrorContext:
    return ErrorContext(record_kind=RecordKind.MCQ.value)


class MissingSectionsError(ChallengeForgeError):
    """Label-shaped text lacks one or more required sections."""
    def __init__(self, missing: list[str], context: ErrorContext | None = None):
        super().__init__(
            f"Generated question is missing sections: {', '.join(missing)}. "
            "Regenerate the question.",
            "MISSING_SECTIONS", ErrorCategory.GENERATED_CONTENT,
            ErrorSeverity.WARNING, context or _mcq_context(), 422,
        )
        self.missing = missing

    def to_response(self) -> dict:
        body = super().to_response()
        body["error"]["missing_sections"] = self.missing
        return body


class WrongOptionCountError(ChallengeForgeError):
    """OPTIONS section does not hold exactly the options A, B, C and D."""
    def __init__(
        self, found: int, ids: list[str] | None = None,
        context: ErrorContext | None = None,
    ):
        found_ids = ", ".join(ids) if ids else "none"
        super().__init__(
            f"Invalid number of options in generated question: found {found} "
            f"({found_ids}) instead of 4 (A, B, C, D). Regenerate the question.",
            "WRONG_OPTION_COUNT", ErrorCategory.GENERATED_CONTENT,
            ErrorSeverity.WARNING, context or _mcq_context(), 422,
        )
        self.found = found
        self.ids = ids or []

    def to_response(self) -> dict:
        body = super().to_response()
        body["error"]["found_options"] = self.found
        return body


class ResourceNotFoundError(ChallengeForgeError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.record_id = resource_id
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(ChallengeForgeError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class GenerationAPIError(ChallengeForgeError):
    """Generation service (Anthropic API) call failed."""
    def __init__(
        self,
        message: str,
        api_error_type: str,
        retry_after_ms: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = retry_after_ms
        super().__init__(
            f"Generation API error ({api_error_type}): {message}",
            "GENERATION_API_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.api_error_type = api_error_type
