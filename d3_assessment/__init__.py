"""
D3 Assessment - Accessibility audits

Runs generic rule engines (axe-core, Pa11y) and first-party analyzers
(contrast, keyboard flow, readability, care-sector checks) against a
rendered page and collects their findings into one audit record.
"""

from .models import AnalysisContext, AnalyzerResult, AuditRecord, AuditRecordSealedError, Issue, summarize
from .severity import normalize
from .types import AuditMode, Severity, WCAGLevel

__all__ = [
    # Models
    "Issue",
    "AnalysisContext",
    "AnalyzerResult",
    "AuditRecord",
    "AuditRecordSealedError",
    "summarize",
    # Types
    "Severity",
    "AuditMode",
    "WCAGLevel",
    # Severity model
    "normalize",
]
