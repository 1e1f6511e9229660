"""
ARIA validator

Flags interactive elements without an accessible name and roles that are
not WAI-ARIA roles.
"""
from typing import Any, Dict, List

from d0_browser.page import PageHandle
from d3_assessment.analyzers.base import BaseAnalyzer
from d3_assessment.models import AnalysisContext, AnalyzerResult, Issue
from d3_assessment.types import Severity

INTERACTIVE_SELECTOR = 'button, a, input, select, textarea, [role="button"], [role="link"]'
ARIA_SELECTOR = "[role], [aria-label], [aria-labelledby]"

# WAI-ARIA 1.2 roles (abstract roles excluded)
VALID_ROLES = frozenset(
    """
    alert alertdialog application article banner blockquote button caption cell checkbox
    code columnheader combobox complementary contentinfo definition deletion dialog
    directory document emphasis feed figure form generic grid gridcell group heading img
    insertion link list listbox listitem log main marquee math menu menubar menuitem
    menuitemcheckbox menuitemradio meter navigation none note option paragraph presentation
    progressbar radio radiogroup region row rowgroup rowheader scrollbar search searchbox
    separator slider spinbutton status strong subscript superscript switch tab table
    tablist tabpanel term textbox time timer toolbar tooltip tree treegrid treeitem
    """.split()
)

ELEMENTS_SCRIPT = """
(selector) => Array.from(document.querySelectorAll(selector)).map((el) => ({
  tagName: el.tagName.toLowerCase(),
  role: el.getAttribute('role'),
  ariaLabel: el.getAttribute('aria-label'),
  ariaLabelledBy: el.getAttribute('aria-labelledby'),
  title: el.getAttribute('title'),
  text: (el.textContent || '').trim().substring(0, 50),
}))
"""


def has_accessible_name(element: Dict[str, Any]) -> bool:
    return any((element.get(key) or "").strip() for key in ("ariaLabel", "ariaLabelledBy", "text", "title"))


def invalid_roles(role: str) -> List[str]:
    """Role tokens not in the WAI-ARIA vocabulary; role may list fallbacks"""
    return [token for token in role.split() if token.lower() not in VALID_ROLES]


class AriaAnalyzer(BaseAnalyzer):
    @property
    def name(self) -> str:
        return "aria-validator"

    def evaluate_elements(self, elements: List[Dict[str, Any]], interactive_only: bool) -> List[Issue]:
        issues = []
        for element in elements:
            tag = element.get("tagName")
            role = element.get("role") or ""

            if interactive_only and not has_accessible_name(element):
                issues.append(
                    Issue(
                        tool=self.name,
                        type="missing-accessible-name",
                        severity=Severity.SERIOUS,
                        description=f"{tag} has no accessible name",
                        wcag_tags=("4.1.2",),
                        element=tag,
                        evidence={"role": role or "none"},
                    )
                )

            bad = invalid_roles(role)
            if bad:
                issues.append(
                    Issue(
                        tool=self.name,
                        type="invalid-role",
                        severity=Severity.MODERATE,
                        description=f"Invalid ARIA role: {' '.join(bad)}",
                        wcag_tags=("4.1.2",),
                        element=tag,
                        evidence={"role": role},
                    )
                )
        return issues

    async def analyze(self, page: PageHandle, context: AnalysisContext) -> AnalyzerResult:
        interactive_only = context.option("check_interactive_only", True)
        selector = INTERACTIVE_SELECTOR if interactive_only else ARIA_SELECTOR

        elements = await page.evaluate(ELEMENTS_SCRIPT, selector) or []
        issues = self.evaluate_elements(elements, interactive_only)

        return AnalyzerResult(
            tool=self.name,
            issues=issues,
            summary={"elements_checked": len(elements), "interactive_only": interactive_only},
        )
