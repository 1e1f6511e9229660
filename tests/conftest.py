"""
Shared fixtures for AccessAudit tests
"""
from typing import Any, Dict, List
from unittest.mock import MagicMock

import pytest

from d3_assessment.models import AnalysisContext, AnalyzerResult, AuditRecord, Issue
from d3_assessment.types import AuditMode, Severity, WCAGLevel
from tests.fixtures.fake_page import FakePage


def make_issue(severity: Severity = Severity.MODERATE, tool: str = "axe-core", issue_type: str = "rule", **kwargs) -> Issue:
    kwargs.setdefault("description", f"{issue_type} issue")
    return Issue(tool=tool, type=issue_type, severity=severity, **kwargs)


def make_record(counts: Dict[str, int], url: str = "https://example.com") -> AuditRecord:
    """Completed audit record holding the given number of issues per severity"""
    record = AuditRecord(url=url, mode=AuditMode.FULL, browser="chromium", wcag_level=WCAGLevel.AA)
    issues: List[Issue] = []
    for severity in Severity:
        issues += [make_issue(severity, issue_type=f"{severity.value}-{i}") for i in range(counts.get(severity.value, 0))]
    record.merge(AnalyzerResult(tool="axe-core", issues=issues))
    record.complete(1.0)
    return record


@pytest.fixture
def fake_page():
    """Factory for fake pages answering scripts from a response table"""

    def _make(responses: Dict[str, Any] = None, **kwargs) -> FakePage:
        return FakePage(responses, **kwargs)

    return _make


@pytest.fixture
def context():
    return AnalysisContext(url="https://example.com", wcag_level=WCAGLevel.AA)


@pytest.fixture
def mock_metrics():
    """Metrics collector that records calls instead of touching the registry"""
    return MagicMock()
