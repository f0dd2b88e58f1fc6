"""
Custom exception classes for the ingestion pipeline.

Error categories:
    - Setup errors: abort the run before any processing
    - Page errors: one page contributes zero records, run continues
    - Record errors: logged and counted, batch continues
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "PERFUME_NOT_FOUND")
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
        self.timestamp = datetime.now(timezone.utc).isoformat()
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


class ExternalServiceError(AppError):
    """External service failure (503)."""

    def __init__(
        self,
        service: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code=f"{service.upper()}_ERROR",
            message=message,
            status_code=503,
            details={"service": service, **(details or {})}
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
# SETUP ERRORS
# ===================

class ConfigurationError(AppError):
    """Run cannot start because configuration is incomplete."""

    def __init__(
        self,
        message: str,
        code: str = "CONFIGURATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=500,
            details=details
        )


class MissingCredentialsError(ConfigurationError):
    """Supabase URL or key not configured."""

    def __init__(self, missing: list[str]):
        super().__init__(
            code="MISSING_CREDENTIALS",
            message=f"Missing store credentials: {', '.join(missing)}",
            details={"missing": missing}
        )


class SourceFileNotFoundError(ConfigurationError):
    """Input file does not exist."""

    def __init__(self, path: str):
        super().__init__(
            code="SOURCE_FILE_NOT_FOUND",
            message=f"Source file not found: {path}",
            details={"path": path}
        )


class SpreadsheetParseError(ValidationError):
    """Spreadsheet could not be read."""

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="SPREADSHEET_PARSE_ERROR",
            message=message,
            details=details
        )


# ===================
# PAGE ERRORS
# ===================

class PageFetchError(ExternalServiceError):
    """Page could not be retrieved (status, transport, timeout)."""

    def __init__(
        self,
        url: str,
        message: str,
        status: Optional[int] = None,
        strategy: str = "http"
    ):
        super().__init__(
            service="page_fetch",
            message=message,
            details={"url": url, "status": status, "strategy": strategy}
        )
        self.url = url
        self.status = status


class PageParseError(ValidationError):
    """Page was retrieved but has no recognisable result structure."""

    def __init__(self, reason: str, details: Optional[dict] = None):
        super().__init__(
            code="PAGE_PARSE_ERROR",
            message=f"Page could not be parsed: {reason}",
            details={"reason": reason, **(details or {})}
        )
        self.reason = reason


# ===================
# PERFUME ERRORS
# ===================

class PerfumeNotFoundError(NotFoundError):
    """Perfume not found."""

    def __init__(self, perfume_id: str):
        super().__init__(
            resource="Perfume",
            identifier=perfume_id,
            code="PERFUME_NOT_FOUND"
        )
