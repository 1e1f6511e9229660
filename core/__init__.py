"""Core utilities and configuration for AccessAudit"""
from core.config import settings
from core.exceptions import AccessAuditError, AnalyzerError, NavigationError, ValidationError
from core.logging import get_logger

__all__ = [
    "settings",
    "get_logger",
    "AccessAuditError",
    "AnalyzerError",
    "NavigationError",
    "ValidationError",
]
