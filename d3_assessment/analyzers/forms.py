"""
Form auditor

Checks every field inside the matched forms for an associated label and,
for free-text fields, an autocomplete hint.
"""
from typing import Any, Dict, List, Optional

from d0_browser.page import PageHandle
from d3_assessment.analyzers.base import BaseAnalyzer
from d3_assessment.models import AnalysisContext, AnalyzerResult, Issue
from d3_assessment.types import Severity

DEFAULT_FORM_SELECTOR = "form"
AUTOCOMPLETE_TYPES = ("email", "tel", "url", "text", "password")
AUTOCOMPLETE_BY_TYPE = {
    "email": "email",
    "tel": "tel",
    "password": "current-password",
}

FORM_FIELDS_SCRIPT = """
(selector) => {
  const fields = [];
  document.querySelectorAll(selector).forEach((form, formIndex) => {
    for (const input of form.querySelectorAll('input, select, textarea')) {
      const labelFor = input.id ? form.querySelector(`label[for="${CSS.escape(input.id)}"]`) : null;
      fields.push({
        form: formIndex,
        tagName: input.tagName.toLowerCase(),
        type: input.type || input.tagName.toLowerCase(),
        id: input.id || '',
        name: input.name || '',
        hasLabel: !!(labelFor || input.closest('label')),
        ariaLabel: input.getAttribute('aria-label'),
        ariaLabelledBy: input.getAttribute('aria-labelledby'),
        autocomplete: input.getAttribute('autocomplete'),
      });
    }
  });
  return fields;
}
"""


def suggest_autocomplete(field_type: str, name: Optional[str]) -> str:
    if field_type in AUTOCOMPLETE_BY_TYPE:
        return AUTOCOMPLETE_BY_TYPE[field_type]
    name = (name or "").lower()
    if "postal" in name:
        return "postal-code"
    if "address" in name:
        return "street-address"
    return "on"


class FormAnalyzer(BaseAnalyzer):
    @property
    def name(self) -> str:
        return "form-auditor"

    def evaluate_fields(self, fields: List[Dict[str, Any]]) -> List[Issue]:
        issues = []
        for field in fields:
            field_type = field.get("type") or "text"
            element = f'{field.get("tagName", "input")}[type="{field_type}"]'

            labelled = field.get("hasLabel") or field.get("ariaLabel") or field.get("ariaLabelledBy")
            if not labelled and field_type != "hidden":
                issues.append(
                    Issue(
                        tool=self.name,
                        type="missing-label",
                        severity=Severity.CRITICAL,
                        description="Form field has no associated label",
                        wcag_tags=("3.3.2", "1.3.1"),
                        element=element,
                        evidence={"name": field.get("name") or "unnamed"},
                    )
                )

            if field_type in AUTOCOMPLETE_TYPES and not field.get("autocomplete"):
                token = suggest_autocomplete(field_type, field.get("name"))
                issues.append(
                    Issue(
                        tool=self.name,
                        type="missing-autocomplete",
                        severity=Severity.MINOR,
                        description="Input field missing autocomplete attribute",
                        wcag_tags=("1.3.5",),
                        element=element,
                        evidence={"suggested_autocomplete": token, "suggestion": f'Add autocomplete="{token}"'},
                    )
                )
        return issues

    async def analyze(self, page: PageHandle, context: AnalysisContext) -> AnalyzerResult:
        selector = context.option("form_selector") or DEFAULT_FORM_SELECTOR
        fields = await page.evaluate(FORM_FIELDS_SCRIPT, selector) or []

        forms = {field.get("form") for field in fields}
        return AnalyzerResult(
            tool=self.name,
            issues=self.evaluate_fields(fields),
            summary={"forms_checked": len(forms), "fields_checked": len(fields)},
        )
