"""
D3 Assessment Models

Issue, per-analyzer result and the audit record that collects them.
Issues live in one ordered list tagged with their severity; the four
severity buckets and the summary counts are derived from it.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from d3_assessment.types import AuditMode, Severity, WCAGLevel


@dataclass(frozen=True)
class Issue:
    """One detected accessibility defect"""

    tool: str
    type: str
    severity: Severity
    description: str
    wcag_tags: Tuple[str, ...] = ()
    selector: Optional[str] = None
    element: Optional[str] = None
    evidence: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # Ordered set: keep first occurrence, drop empties
        seen = []
        for tag in self.wcag_tags:
            if tag and tag not in seen:
                seen.append(tag)
        object.__setattr__(self, "wcag_tags", tuple(seen))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "tool": self.tool,
            "type": self.type,
            "severity": self.severity.value,
            "wcag_tags": list(self.wcag_tags),
            "description": self.description,
        }
        if self.selector is not None:
            data["selector"] = self.selector
        if self.element is not None:
            data["element"] = self.element
        data.update(self.evidence)
        return data


def group_by_severity(issues: Iterable[Issue]) -> Dict[Severity, List[Issue]]:
    """Bucket issues by severity, keeping insertion order within each bucket"""
    buckets: Dict[Severity, List[Issue]] = {severity: [] for severity in Severity}
    for issue in issues:
        buckets[issue.severity].append(issue)
    return buckets


def summarize(issues: Iterable[Issue]) -> Dict[str, int]:
    """Counts per severity plus total, always derived from the buckets"""
    buckets = group_by_severity(issues)
    summary = {severity.value: len(bucket) for severity, bucket in buckets.items()}
    summary["total"] = sum(summary[severity.value] for severity in Severity)
    return summary


@dataclass
class AnalysisContext:
    """What an analyzer needs to know about the audit it is part of"""

    url: str
    wcag_level: WCAGLevel = WCAGLevel.AA
    browser: str = "chromium"
    options: Dict[str, Any] = field(default_factory=dict)

    def option(self, name: str, default: Any = None) -> Any:
        return self.options.get(name, default)


@dataclass
class AnalyzerResult:
    """Issues and side data produced by one analyzer run"""

    tool: str
    issues: List[Issue] = field(default_factory=list)
    summary: Dict[str, Any] = field(default_factory=dict)
    data: Dict[str, Any] = field(default_factory=dict)
    message: Optional[str] = None

    @property
    def issues_by_severity(self) -> Dict[Severity, List[Issue]]:
        return group_by_severity(self.issues)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "tool": self.tool,
            "issues": {
                severity.value: [issue.to_dict() for issue in bucket]
                for severity, bucket in self.issues_by_severity.items()
            },
            "issue_counts": summarize(self.issues),
        }
        if self.summary:
            result["summary"] = self.summary
        if self.message:
            result["message"] = self.message
        result.update(self.data)
        return result


class AuditRecordSealedError(RuntimeError):
    """Raised when a completed audit record is modified"""


@dataclass
class AuditRecord:
    """
    One audit run against one page

    Mutated only by the coordinator while the run is in flight; complete()
    seals it.
    """

    url: str
    mode: AuditMode
    browser: str
    wcag_level: WCAGLevel
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    tools_run: Sequence[str] = field(default_factory=list)
    tools_failed: Dict[str, str] = field(default_factory=dict)
    issues: Sequence[Issue] = field(default_factory=list)
    duration_seconds: Optional[float] = None
    completed: bool = False

    def _check_open(self) -> None:
        if self.completed:
            raise AuditRecordSealedError(f"Audit {self.id} is complete and cannot be modified")

    def merge(self, result: AnalyzerResult) -> None:
        """Append an analyzer's issues in execution order and mark it as run"""
        self._check_open()
        self.issues.extend(result.issues)
        self.tools_run.append(result.tool)

    def record_failure(self, tool: str, error: str) -> None:
        self._check_open()
        self.tools_failed[tool] = error

    def complete(self, duration_seconds: float) -> "AuditRecord":
        self._check_open()
        self.duration_seconds = round(duration_seconds, 2)
        self.issues = tuple(self.issues)
        self.tools_run = tuple(self.tools_run)
        self.tools_failed = dict(self.tools_failed)
        self.completed = True
        return self

    @property
    def issues_by_severity(self) -> Dict[Severity, List[Issue]]:
        return group_by_severity(self.issues)

    def bucket(self, severity: Severity) -> List[Issue]:
        return [issue for issue in self.issues if issue.severity is severity]

    @property
    def summary(self) -> Dict[str, int]:
        return summarize(self.issues)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "url": self.url,
            "mode": self.mode.value,
            "browser": self.browser,
            "wcag_level": self.wcag_level.value,
            "timestamp": self.timestamp,
            "tools_run": list(self.tools_run),
            "tools_failed": dict(self.tools_failed),
            "issues": {
                severity.value: [issue.to_dict() for issue in bucket]
                for severity, bucket in self.issues_by_severity.items()
            },
            "summary": self.summary,
            "duration_seconds": self.duration_seconds,
        }
