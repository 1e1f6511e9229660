"""
D3 Assessment Types

Enums shared by analyzers, the audit coordinator and the scoring engine.
"""

from enum import Enum


class Severity(Enum):
    """Canonical four-tier issue severity"""

    CRITICAL = "critical"
    SERIOUS = "serious"
    MODERATE = "moderate"
    MINOR = "minor"

    @property
    def rank(self) -> int:
        """Lower rank = more severe"""
        return list(Severity).index(self)

    @classmethod
    def from_label(cls, label: str) -> "Severity":
        return cls(label.lower())


class AuditMode(Enum):
    """How much of the analyzer stack an audit runs"""

    SUMMARY = "summary"  # axe-core only
    FULL = "full"  # axe-core, pa11y and every first-party analyzer


class WCAGLevel(Enum):
    """WCAG conformance level targeted by an audit"""

    A = "A"
    AA = "AA"
    AAA = "AAA"

    @property
    def axe_tags(self) -> list:
        """Cumulative axe-core rule tags for this level"""
        tags = ["wcag2a", "wcag21a"]
        if self in (WCAGLevel.AA, WCAGLevel.AAA):
            tags += ["wcag2aa", "wcag21aa"]
        if self is WCAGLevel.AAA:
            tags += ["wcag2aaa"]
        return tags

    @property
    def pa11y_standard(self) -> str:
        return f"WCAG2{self.value}"
