"""
Page analyzers
"""

from d3_assessment.analyzers.aria import AriaAnalyzer
from d3_assessment.analyzers.axe import AxeAnalyzer
from d3_assessment.analyzers.base import BaseAnalyzer
from d3_assessment.analyzers.contrast import ContrastAnalyzer
from d3_assessment.analyzers.domain_compliance import DomainComplianceAnalyzer
from d3_assessment.analyzers.forms import FormAnalyzer
from d3_assessment.analyzers.keyboard import KeyboardAnalyzer
from d3_assessment.analyzers.pa11y import Pa11yAnalyzer
from d3_assessment.analyzers.readability import ReadabilityAnalyzer

# Analyzer registry
ANALYZER_REGISTRY: dict[str, type[BaseAnalyzer]] = {
    "axe-core": AxeAnalyzer,
    "pa11y": Pa11yAnalyzer,
    "contrast-checker": ContrastAnalyzer,
    "keyboard-tester": KeyboardAnalyzer,
    "cognitive-checker": ReadabilityAnalyzer,
    "care-sector-checker": DomainComplianceAnalyzer,
    "aria-validator": AriaAnalyzer,
    "form-auditor": FormAnalyzer,
}

# Order a full audit runs in; summary audits stop after the first
FULL_AUDIT_ORDER = [
    "axe-core",
    "pa11y",
    "contrast-checker",
    "keyboard-tester",
    "cognitive-checker",
    "care-sector-checker",
]

__all__ = [
    "BaseAnalyzer",
    "AxeAnalyzer",
    "Pa11yAnalyzer",
    "ContrastAnalyzer",
    "KeyboardAnalyzer",
    "ReadabilityAnalyzer",
    "DomainComplianceAnalyzer",
    "AriaAnalyzer",
    "FormAnalyzer",
    "ANALYZER_REGISTRY",
    "FULL_AUDIT_ORDER",
]
