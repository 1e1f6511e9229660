"""
D5 Scoring Module

Accessibility score, rating, UK legal compliance and recommendations
derived from a completed audit record.
"""

from .engine import ScoringEngine, score_counts
from .formatter import format_score_summary
from .models import LegalCompliance, Recommendation, ScoreBreakdown, ScoreRecord, WCAGVerdict
from .types import ComplianceStatus, Priority, Rating, RiskLevel

__version__ = "1.0.0"

__all__ = [
    # Engine
    "ScoringEngine",
    "score_counts",
    "format_score_summary",
    # Models
    "ScoreRecord",
    "ScoreBreakdown",
    "LegalCompliance",
    "Recommendation",
    "WCAGVerdict",
    # Types
    "Rating",
    "ComplianceStatus",
    "RiskLevel",
    "Priority",
]
