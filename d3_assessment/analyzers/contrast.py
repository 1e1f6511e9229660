"""
Color contrast analyzer

Reads the rendered foreground/effective-background color of every visible
text element, evaluates each unique color pair once against the WCAG
contrast thresholds and proposes a passing color for every failure.
"""
import re
from typing import Any, Dict, List, Optional, Tuple

from core.logging import get_logger
from d0_browser.page import PageHandle
from d3_assessment.analyzers.base import BaseAnalyzer
from d3_assessment.models import AnalysisContext, AnalyzerResult, Issue
from d3_assessment.types import Severity, WCAGLevel

logger = get_logger(__name__, domain="d3")

RGB = Tuple[int, int, int]

FIX_STEP = 50
FALLBACK_TEXT = "#1F2937"
FALLBACK_BACKGROUND = "#FFFFFF"
CRITICAL_RATIO = 3.0

# (normal text, large text)
REQUIRED_RATIOS = {
    WCAGLevel.AA: (4.5, 3.0),
    WCAGLevel.AAA: (7.0, 4.5),
}

RGB_PATTERN = re.compile(r"rgba?\(\s*(\d+(?:\.\d+)?)[\s,]+(\d+(?:\.\d+)?)[\s,]+(\d+(?:\.\d+)?)")
HEX_PATTERN = re.compile(r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

TEXT_STYLES_SCRIPT = r"""
(scope) => {
  const isTransparent = (bg) => !bg || bg === 'transparent' || /rgba\([^)]*,\s*0(\.0+)?\)$/.test(bg);
  const effectiveBackground = (el) => {
    let node = el;
    while (node && node.nodeType === 1) {
      const bg = window.getComputedStyle(node).backgroundColor;
      if (!isTransparent(bg)) return bg;
      node = node.parentElement;
    }
    return 'rgb(255, 255, 255)';
  };
  const roots = scope ? Array.from(document.querySelectorAll(scope)) : [document.body];
  const elements = [];
  for (const root of roots) {
    if (!root) continue;
    elements.push(root, ...root.querySelectorAll('*'));
  }
  const results = [];
  for (const el of elements) {
    if (['SCRIPT', 'STYLE', 'NOSCRIPT', 'TEMPLATE'].includes(el.tagName)) continue;
    const hasText = Array.from(el.childNodes).some((n) => n.nodeType === 3 && n.textContent.trim());
    if (!hasText) continue;
    const styles = window.getComputedStyle(el);
    if (styles.display === 'none' || styles.visibility === 'hidden' || el.getClientRects().length === 0) continue;
    results.push({
      color: styles.color,
      backgroundColor: effectiveBackground(el),
      fontSize: parseFloat(styles.fontSize),
      fontWeight: styles.fontWeight,
      text: el.textContent.trim().substring(0, 50),
      tagName: el.tagName.toLowerCase(),
    });
  }
  return results;
}
"""


def parse_color(value: Optional[str]) -> Optional[RGB]:
    """Parse rgb()/rgba()/#rgb/#rrggbb into an (r, g, b) tuple"""
    if not value:
        return None
    value = value.strip()

    match = RGB_PATTERN.match(value)
    if match:
        return tuple(min(255, int(round(float(channel)))) for channel in match.groups())

    match = HEX_PATTERN.match(value)
    if match:
        digits = match.group(1)
        if len(digits) == 3:
            digits = "".join(d * 2 for d in digits)
        return tuple(int(digits[i : i + 2], 16) for i in (0, 2, 4))

    return None


def format_color(rgb: RGB) -> str:
    return f"rgb({rgb[0]}, {rgb[1]}, {rgb[2]})"


def _linear(channel: int) -> float:
    c = channel / 255
    return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(rgb: RGB) -> float:
    r, g, b = (_linear(c) for c in rgb)
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_ratio(foreground: RGB, background: RGB) -> float:
    lighter, darker = sorted((relative_luminance(foreground), relative_luminance(background)), reverse=True)
    return (lighter + 0.05) / (darker + 0.05)


def _font_weight(value: Any) -> int:
    if isinstance(value, (int, float)):
        return int(value)
    text = str(value or "").strip().lower()
    if text.isdigit():
        return int(text)
    return {"bold": 700, "bolder": 700}.get(text, 400)


def is_large_text(font_size_px: Optional[float], font_weight: Any) -> bool:
    """18pt+, or 14pt+ when bold; computed font sizes arrive in px"""
    if not font_size_px:
        return False
    points = font_size_px * 0.75
    return points >= 18 or (points >= 14 and _font_weight(font_weight) >= 700)


def required_ratio(level: WCAGLevel, large_text: bool) -> float:
    normal, large = REQUIRED_RATIOS.get(level, REQUIRED_RATIOS[WCAGLevel.AA])
    return large if large_text else normal


def _step(rgb: RGB, delta: int) -> RGB:
    return tuple(max(0, min(255, c + delta)) for c in rgb)


def suggest_fix(foreground: RGB, background: RGB, required: float, step: int = FIX_STEP) -> Dict[str, Any]:
    """
    First passing fix among: darker text, lighter background, fallback pair

    Each candidate is moved one step at a time until it passes or hits the
    end of the channel range.
    """
    darker = foreground
    while darker != (0, 0, 0):
        darker = _step(darker, -step)
        ratio = contrast_ratio(darker, background)
        if ratio >= required:
            return {
                "method": "Darken text color",
                "new_text_color": format_color(darker),
                "new_ratio": round(ratio, 2),
            }

    lighter = background
    while lighter != (255, 255, 255):
        lighter = _step(lighter, step)
        ratio = contrast_ratio(foreground, lighter)
        if ratio >= required:
            return {
                "method": "Lighten background color",
                "new_background_color": format_color(lighter),
                "new_ratio": round(ratio, 2),
            }

    return {
        "method": "Use high contrast colors",
        "new_text_color": FALLBACK_TEXT,
        "new_background_color": FALLBACK_BACKGROUND,
        "new_ratio": round(contrast_ratio(parse_color(FALLBACK_TEXT), parse_color(FALLBACK_BACKGROUND)), 2),
    }


def deduplicate(issues: List[Issue]) -> List[Issue]:
    """Keep the first issue per (text color, background color) pair"""
    seen = set()
    unique = []
    for issue in issues:
        key = (issue.evidence.get("text_color"), issue.evidence.get("background_color"))
        if key in seen:
            continue
        seen.add(key)
        unique.append(issue)
    return unique


class ContrastAnalyzer(BaseAnalyzer):
    """WCAG 1.4.3 / 1.4.6 contrast checks"""

    @property
    def name(self) -> str:
        return "contrast-checker"

    def evaluate_pairs(self, elements: List[Dict[str, Any]], level: WCAGLevel) -> Tuple[List[Issue], int]:
        """Check each unique color pair once; returns (issues, unique pairs seen)"""
        checked = set()
        issues = []
        wcag_tags = ("1.4.3", "1.4.6") if level is WCAGLevel.AAA else ("1.4.3",)

        for styles in elements:
            color, background = styles.get("color"), styles.get("backgroundColor")
            if not color or not background:
                continue

            combo = (color, background)
            if combo in checked:
                continue
            checked.add(combo)

            foreground_rgb, background_rgb = parse_color(color), parse_color(background)
            if foreground_rgb is None or background_rgb is None:
                logger.debug(f"Skipping unparseable color pair {combo}")
                continue

            ratio = contrast_ratio(foreground_rgb, background_rgb)
            large = is_large_text(styles.get("fontSize"), styles.get("fontWeight"))
            required = required_ratio(level, large)
            if ratio >= required:
                continue

            issues.append(
                Issue(
                    tool=self.name,
                    type="insufficient-contrast",
                    severity=Severity.CRITICAL if ratio < CRITICAL_RATIO else Severity.SERIOUS,
                    description="Insufficient color contrast",
                    wcag_tags=wcag_tags,
                    element=styles.get("tagName"),
                    evidence={
                        "text_color": color,
                        "background_color": background,
                        "actual_ratio": round(ratio, 2),
                        "required_ratio": required,
                        "level": level.value,
                        "is_large_text": large,
                        "sample": styles.get("text", ""),
                        "fix": suggest_fix(foreground_rgb, background_rgb, required),
                    },
                )
            )

        return deduplicate(issues), len(checked)

    async def analyze(self, page: PageHandle, context: AnalysisContext) -> AnalyzerResult:
        level = WCAGLevel.AAA if context.wcag_level is WCAGLevel.AAA else WCAGLevel.AA
        scope = context.option("selector")

        elements = await page.evaluate(TEXT_STYLES_SCRIPT, scope) or []
        issues, checked = self.evaluate_pairs(elements, level)

        logger.info(f"Contrast: {checked} unique color pairs, {len(issues)} failing")
        return AnalyzerResult(
            tool=self.name,
            issues=issues,
            summary={"total_checked": checked, "failed": len(issues)},
        )
