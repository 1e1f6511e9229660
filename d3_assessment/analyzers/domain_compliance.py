"""
Care-sector compliance analyzer

Heuristics for care and health websites on top of WCAG: emergency
features, text sizing for elderly readers, health information clarity and
care-record form fields. Every check runs on its own; a failed check is
logged and its compliance flag is reported as None.
"""
from typing import Any, Awaitable, Callable, Dict, List, Optional

from core.config import get_settings
from core.logging import get_logger
from d0_browser.page import PageHandle
from d3_assessment.analyzers.base import BaseAnalyzer
from d3_assessment.models import AnalysisContext, AnalyzerResult, Issue
from d3_assessment.types import Severity

logger = get_logger(__name__, domain="d3")

EMERGENCY_KEYWORDS = ["emergency", "urgent", "crisis", "alert", "999", "111", "help"]
HEALTH_KEYWORDS = [
    "medication",
    "dosage",
    "prescription",
    "treatment",
    "diagnosis",
    "allergy",
    "condition",
    "symptoms",
    "side effects",
    "contraindication",
]
CARE_RECORD_KEYWORDS = ["care plan", "resident", "patient", "notes", "assessment", "observation"]

EMERGENCY_MIN_FONT_PX = 16
ELDERLY_MIN_FONT_PX = 14
HEALTH_MIN_FONT_PX = 14
UNCLEAR_LABEL_LENGTH = 5

EMERGENCY_ELEMENTS_SCRIPT = """
(keywords) => {
  const selector = 'button, a, [role="button"], [class*="emergency"], [class*="alert"]';
  const elements = [];
  for (const el of document.querySelectorAll(selector)) {
    const text = (el.textContent || '').toLowerCase();
    const classes = (typeof el.className === 'string' ? el.className : '').toLowerCase();
    const id = (el.id || '').toLowerCase();
    if (!keywords.some((k) => text.includes(k) || classes.includes(k) || id.includes(k))) continue;
    const styles = window.getComputedStyle(el);
    elements.push({
      text: (el.textContent || '').trim().substring(0, 50),
      tagName: el.tagName.toLowerCase(),
      fontSize: parseFloat(styles.fontSize),
      isVisible: el.offsetParent !== null,
      hasAriaLabel: el.hasAttribute('aria-label'),
      role: el.getAttribute('role'),
    });
  }
  return elements;
}
"""

SMALL_TEXT_SCRIPT = """
(minPx) => {
  const elements = [];
  for (const el of document.querySelectorAll('p, li, td, span, div, label')) {
    const text = (el.textContent || '').trim();
    if (text.length < 10) continue;
    const fontSize = parseFloat(window.getComputedStyle(el).fontSize);
    if (fontSize < minPx) {
      elements.push({ tagName: el.tagName.toLowerCase(), fontSize, text: text.substring(0, 50) });
      if (elements.length >= 10) break;
    }
  }
  return elements;
}
"""

PALETTE_USAGE_SCRIPT = """
() => Array.from(document.querySelectorAll('[class*="nhs"], [class*="NHS"]')).map((el) => {
  const styles = window.getComputedStyle(el);
  return { color: styles.color, backgroundColor: styles.backgroundColor };
})
"""

HEALTH_TEXT_SCRIPT = """
(keywords) => {
  const findings = [];
  for (const el of document.querySelectorAll('p, li, div, span, td')) {
    const text = (el.textContent || '').toLowerCase();
    const keyword = keywords.find((k) => text.includes(k));
    if (!keyword) continue;
    const styles = window.getComputedStyle(el);
    findings.push({
      text: (el.textContent || '').trim().substring(0, 100),
      fontSize: parseFloat(styles.fontSize),
      fontWeight: styles.fontWeight,
      keyword,
    });
  }
  return findings;
}
"""

CARE_RECORD_FIELDS_SCRIPT = """
(keywords) => {
  const fields = [];
  for (const input of document.querySelectorAll('input, textarea, select')) {
    const label = input.id ? document.querySelector(`label[for="${CSS.escape(input.id)}"]`) : null;
    const placeholder = (input.placeholder || '').toLowerCase();
    const labelText = label ? (label.textContent || '').trim().toLowerCase() : '';
    const name = (input.name || '').toLowerCase();
    if (!keywords.some((k) => placeholder.includes(k) || labelText.includes(k) || name.includes(k))) continue;
    fields.push({
      type: input.tagName === 'TEXTAREA' ? 'textarea' : (input.type || input.tagName.toLowerCase()),
      name,
      hasLabel: !!label,
      hasAutocomplete: input.hasAttribute('autocomplete'),
      placeholder,
      labelText,
    });
  }
  return fields;
}
"""

COMPLIANCE_FLAGS = {
    "emergency": "emergency_accessible",
    "elderly": "elderly_friendly",
    "palette": "palette_compliant",
    "health": "health_info_clear",
    "care_record": "care_record_accessible",
}


class DomainComplianceAnalyzer(BaseAnalyzer):
    """Care-sector (CQC / NHS digital) checks"""

    def __init__(self, small_emergency_severity: Optional[str] = None):
        label = small_emergency_severity or get_settings().emergency_small_text_severity
        self.small_emergency_severity = Severity.from_label(label)

    @property
    def name(self) -> str:
        return "care-sector-checker"

    def _issue(self, issue_type: str, severity: Severity, description: str, wcag_tags, **evidence) -> Issue:
        return Issue(
            tool=self.name,
            type=issue_type,
            severity=severity,
            description=description,
            wcag_tags=tuple(wcag_tags),
            element=evidence.pop("element", None),
            evidence=evidence,
        )

    async def check_emergency(self, page: PageHandle) -> List[Issue]:
        issues = []
        for element in await page.evaluate(EMERGENCY_ELEMENTS_SCRIPT, EMERGENCY_KEYWORDS) or []:
            text = element.get("text") or ""

            if not element.get("isVisible", True):
                issues.append(
                    self._issue(
                        "emergency-feature-hidden",
                        Severity.CRITICAL,
                        "Emergency feature is hidden",
                        ["CQC-Safe"],
                        element=text,
                        suggestion="Emergency features must be always visible",
                        care_sector_standard="CQC Safe - Emergency features must be accessible at all times",
                    )
                )

            if not element.get("hasAriaLabel") and len(text) < UNCLEAR_LABEL_LENGTH:
                issues.append(
                    self._issue(
                        "emergency-feature-unclear-label",
                        Severity.SERIOUS,
                        "Emergency feature has unclear or missing label",
                        ["4.1.2", "CQC-Safe"],
                        element=element.get("tagName"),
                        suggestion="Add clear aria-label describing the emergency action",
                        care_sector_standard="CQC Safe - Emergency features must be clearly labelled",
                    )
                )

            font_size = element.get("fontSize")
            if font_size is not None and font_size < EMERGENCY_MIN_FONT_PX:
                issues.append(
                    self._issue(
                        "emergency-feature-too-small",
                        self.small_emergency_severity,
                        f"Emergency feature text too small ({font_size}px)",
                        ["1.4.4", "CQC-Safe"],
                        element=text,
                        font_size=font_size,
                        suggestion="Emergency features should be at least 18px for elderly users",
                        care_sector_standard="CQC Safe - Emergency features must be immediately identifiable",
                    )
                )
        return issues

    async def check_elderly_text(self, page: PageHandle) -> List[Issue]:
        small = await page.evaluate(SMALL_TEXT_SCRIPT, ELDERLY_MIN_FONT_PX) or []
        if not small:
            return []
        return [
            self._issue(
                "text-too-small-for-elderly",
                Severity.MODERATE,
                f"{len(small)} text elements below {ELDERLY_MIN_FONT_PX}px (elderly users may struggle)",
                ["1.4.4", "NHS-Digital-Standard"],
                examples=small[:5],
                suggestion="Use minimum 14px for body text, 16px preferred for elderly users",
                care_sector_standard="NHS Digital Service Standard - Design for users with visual impairments",
            )
        ]

    async def check_palette(self, page: PageHandle) -> List[Issue]:
        # Brand palette rules are not defined yet; usage is collected only
        usage = await page.evaluate(PALETTE_USAGE_SCRIPT) or []
        logger.debug(f"Palette: {len(usage)} branded elements")
        return []

    async def check_health_info(self, page: PageHandle) -> List[Issue]:
        issues = []
        for info in await page.evaluate(HEALTH_TEXT_SCRIPT, HEALTH_KEYWORDS) or []:
            font_size = info.get("fontSize")
            if font_size is not None and font_size < HEALTH_MIN_FONT_PX:
                issues.append(
                    self._issue(
                        "health-info-unclear",
                        Severity.SERIOUS,
                        "Health/medication information uses small text",
                        ["CQC-Effective"],
                        text=info.get("text"),
                        font_size=font_size,
                        keyword=info.get("keyword"),
                        suggestion="Health-critical information should be at least 16px and bold",
                        care_sector_standard="CQC Effective - Health information must be clearly communicated",
                    )
                )
        return issues

    async def check_care_records(self, page: PageHandle) -> List[Issue]:
        issues = []
        for field in await page.evaluate(CARE_RECORD_FIELDS_SCRIPT, CARE_RECORD_KEYWORDS) or []:
            if field.get("hasAutocomplete") or field.get("type") == "textarea":
                continue
            issues.append(
                self._issue(
                    "care-record-missing-autocomplete",
                    Severity.MODERATE,
                    "Care record field missing autocomplete attribute",
                    ["1.3.5"],
                    field=field.get("labelText") or field.get("placeholder") or field.get("name"),
                    suggestion="Add autocomplete to help staff fill forms faster",
                    care_sector_standard="CQC Effective - Systems should support efficient care delivery",
                )
            )
        return issues

    async def analyze(self, page: PageHandle, context: AnalysisContext) -> AnalyzerResult:
        checks: Dict[str, Callable[[PageHandle], Awaitable[List[Issue]]]] = {
            "emergency": self.check_emergency,
            "elderly": self.check_elderly_text,
            "palette": self.check_palette,
            "health": self.check_health_info,
            "care_record": self.check_care_records,
        }

        issues: List[Issue] = []
        compliance: Dict[str, Any] = {}
        for key, check in checks.items():
            try:
                found = await check(page)
            except Exception as e:
                logger.warning(f"Care-sector {key} check failed: {e}")
                compliance[COMPLIANCE_FLAGS[key]] = None
                continue
            issues.extend(found)
            compliance[COMPLIANCE_FLAGS[key]] = not found

        return AnalyzerResult(
            tool=self.name,
            issues=issues,
            summary={"checks_failed": [k for k, v in compliance.items() if v is None]},
            data={"care_sector_compliance": compliance},
        )
