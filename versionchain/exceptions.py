"""Custom exception hierarchy for versionchain."""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Chain integrity errors
    MISSING_BASELINE = "MISSING_BASELINE"
    CORRUPT_DELTA = "CORRUPT_DELTA"
    SIZE_MEASUREMENT_FAILED = "SIZE_MEASUREMENT_FAILED"

    # Document errors
    DOCUMENT_NOT_FOUND = "DOCUMENT_NOT_FOUND"

    # Concurrency errors
    VERSION_CONFLICT = "VERSION_CONFLICT"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Database errors
    DATABASE_ERROR = "DATABASE_ERROR"


class VersionChainError(Exception):
    """
    Base exception for all versionchain errors.

    Provides structured error responses with:
    - Human-readable message
    - Machine-readable error code
    - HTTP status code
    - Optional additional details
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            status_code: HTTP status code to return
            details: Optional additional context/details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for JSON response.

        Returns:
            Dictionary with error, message, and details fields
        """
        return {
            "error": self.error_code.value,
            "message": self.message,
            "details": self.details
        }


class MissingBaselineError(VersionChainError):
    """No baseline exists at or before the requested version."""

    def __init__(self, target_version: int, document_id: Optional[str] = None):
        details: Dict[str, Any] = {"target_version": target_version}
        if document_id:
            details["document_id"] = document_id
        super().__init__(
            f"No baseline found for version {target_version}",
            ErrorCode.MISSING_BASELINE,
            status_code=404,
            details=details
        )


class CorruptDeltaError(VersionChainError):
    """A delta does not replay cleanly against its base content."""

    def __init__(self, message: str, version: Optional[int] = None, **details: Any):
        if version is not None:
            details["version"] = version
        super().__init__(
            message,
            ErrorCode.CORRUPT_DELTA,
            status_code=500,
            details=details
        )


class SizeMeasurementError(VersionChainError):
    """Speculative delta compression failed while measuring its size."""

    def __init__(self, version: int, original_error: Optional[Exception] = None):
        details: Dict[str, Any] = {"version": version}
        if original_error:
            details["original_error"] = str(original_error)
        super().__init__(
            f"Could not measure delta size for version {version}",
            ErrorCode.SIZE_MEASUREMENT_FAILED,
            status_code=500,
            details=details
        )


class DocumentNotFoundError(VersionChainError):
    """Document not found in database."""

    def __init__(self, document_id: str):
        super().__init__(
            f"Document not found: {document_id}",
            ErrorCode.DOCUMENT_NOT_FOUND,
            status_code=404,
            details={"document_id": document_id}
        )


class VersionConflictError(VersionChainError):
    """Write conflicts with a concurrent modification of the same chain."""

    def __init__(
        self,
        document_id: str,
        version: int,
        message: str = "Document was modified by another writer"
    ):
        super().__init__(
            message,
            ErrorCode.VERSION_CONFLICT,
            status_code=409,
            details={"document_id": document_id, "version": version}
        )


class ValidationError(VersionChainError):
    """Validation failed for caller input."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(
            message,
            ErrorCode.VALIDATION_ERROR,
            status_code=400,
            details=details
        )


class DatabaseError(VersionChainError):
    """Database operation failed."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        details = {}
        if original_error:
            details["original_error"] = str(original_error)

        super().__init__(
            message,
            ErrorCode.DATABASE_ERROR,
            status_code=500,
            details=details
        )
