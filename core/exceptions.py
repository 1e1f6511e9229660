"""
Custom exceptions for AccessAudit
Provides structured error handling across all domains
"""
from typing import Any, Dict, Optional


class AccessAuditError(Exception):
    """Base exception for all AccessAudit errors"""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a serializable error payload"""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(AccessAuditError):
    """Raised when input validation fails"""

    def __init__(self, message: str, field: Optional[str] = None, **details):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details={"field": field, **details} if field else details,
        )


class NotFoundError(AccessAuditError):
    """Raised when a resource is not found"""

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            message=f"{resource} not found: {identifier}",
            error_code="NOT_FOUND",
            details={"resource": resource, "identifier": str(identifier)},
        )


class ConfigurationError(AccessAuditError):
    """Raised when configuration is invalid or missing"""

    def __init__(self, message: str, setting: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details={"setting": setting} if setting else {},
        )


class NavigationError(AccessAuditError):
    """Raised when the page under audit could not be loaded"""

    def __init__(self, url: str, reason: Optional[str] = None, browser: Optional[str] = None):
        super().__init__(
            message=f"Failed to load page: {reason or 'unknown error'}",
            error_code="NAVIGATION_ERROR",
            details={"url": url, "browser": browser, "reason": reason},
        )


class AnalyzerError(AccessAuditError):
    """Raised when a single analyzer fails during an audit"""

    def __init__(self, analyzer: str, message: str, url: Optional[str] = None, **details):
        super().__init__(
            message=f"{analyzer} failed: {message}",
            error_code="ANALYZER_ERROR",
            details={"analyzer": analyzer, "url": url, **details},
        )
        self.analyzer = analyzer


class UnknownOperationError(AccessAuditError):
    """Raised when a caller requests an operation that does not exist"""

    def __init__(self, operation: str):
        super().__init__(
            message=f"Unknown tool: {operation}",
            error_code="UNKNOWN_OPERATION",
            details={"operation": operation},
        )
