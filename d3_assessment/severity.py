"""
Severity model

Maps each generic detector's own severity vocabulary onto the canonical
four tiers. First-party analyzers assign Severity directly and never go
through here.
"""
from typing import Dict, Optional

from d3_assessment.types import Severity

DEFAULT_SEVERITY = Severity.MODERATE

SEVERITY_TABLES: Dict[str, Dict[str, Severity]] = {
    "axe-core": {
        "critical": Severity.CRITICAL,
        "serious": Severity.SERIOUS,
        "moderate": Severity.MODERATE,
        "minor": Severity.MINOR,
    },
    "pa11y": {
        "error": Severity.CRITICAL,
        "warning": Severity.SERIOUS,
        "notice": Severity.MODERATE,
    },
}


def normalize(source_tool: str, label: Optional[str]) -> Severity:
    """
    Map a (tool, raw label) pair to a canonical severity

    Total: unknown tools, unknown labels and missing labels all map to
    moderate so no finding is ever dropped.
    """
    table = SEVERITY_TABLES.get(source_tool)
    if table is None or not label:
        return DEFAULT_SEVERITY
    return table.get(str(label).strip().lower(), DEFAULT_SEVERITY)
