"""
Readability analyzer

Scores the main content with Flesch Reading Ease and flags hard-to-read
text, long sentences, complex vocabulary, sector jargon and time limits.
"""
import re
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

from core.logging import get_logger
from d0_browser.page import PageHandle
from d3_assessment.analyzers.base import BaseAnalyzer
from d3_assessment.models import AnalysisContext, AnalyzerResult, Issue
from d3_assessment.types import Severity

logger = get_logger(__name__, domain="d3")

MIN_TEXT_LENGTH = 100
TARGET_FLESCH = 60
VERY_DIFFICULT_FLESCH = 30
MAX_AVERAGE_SENTENCE_LENGTH = 25
MAX_COMPLEX_WORD_PERCENTAGE = 15

# Terms that routinely confuse residents and families
JARGON_TERMS = [
    "holistic",
    "multidisciplinary",
    "stakeholder",
    "baseline",
    "metrics",
    "synergy",
    "leverage",
    "paradigm",
    "utilization",
    "facilitate",
    "implementation",
    "optimization",
    "streamline",
    "bandwidth",
    "CQC",
    "GDPR",
    "safeguarding",
    "care plan",
    "risk assessment",
]

TIME_LIMIT_MARKERS = ("setTimeout", "sessionTimeout", "idleTimeout")

READING_LEVELS = [
    (90, "Very Easy (5th grade)"),
    (80, "Easy (6th grade)"),
    (70, "Fairly Easy (7th grade)"),
    (60, "Standard (8th-9th grade)"),
    (50, "Fairly Difficult (10th-12th grade)"),
    (30, "Difficult (College)"),
]
HARDEST_READING_LEVEL = "Very Difficult (College graduate)"

SENTENCE_SPLIT = re.compile(r"[.!?]+")
WORD_PATTERN = re.compile(r"\b[a-z]+\b")
VOWEL_GROUPS = re.compile(r"[aeiouy]+")

MAIN_TEXT_SCRIPT = """
() => {
  const main = document.querySelector('main, [role="main"], article, .content, #content');
  const area = main || document.body;
  if (!area) return '';
  const excluded = ['SCRIPT', 'STYLE', 'NAV', 'HEADER', 'FOOTER'];
  const walker = document.createTreeWalker(area, NodeFilter.SHOW_TEXT, {
    acceptNode: (node) => {
      const parent = node.parentElement;
      if (!parent || excluded.includes(parent.tagName)) return NodeFilter.FILTER_REJECT;
      return node.textContent.trim() ? NodeFilter.FILTER_ACCEPT : NodeFilter.FILTER_REJECT;
    },
  });
  const texts = [];
  let node;
  while ((node = walker.nextNode())) texts.push(node.textContent.trim());
  return texts.join(' ');
}
"""

TIME_LIMIT_SOURCES_SCRIPT = """
() => ({
  scripts: Array.from(document.querySelectorAll('script')).map((s) => s.textContent || ''),
  metaRefresh: (document.querySelector('meta[http-equiv="refresh"]') || {}).content || null,
})
"""


def count_syllables(word: str) -> int:
    """Vowel-group estimate with silent-e and -le handling; never below 1"""
    word = word.lower()
    count = len(VOWEL_GROUPS.findall(word))
    if word.endswith("e") and count > 1:
        # "table", "little": the final -le is voiced after a consonant
        if not (word.endswith("le") and len(word) > 2 and word[-3] not in "aeiouy"):
            count -= 1
    return max(1, count)


def reading_level(flesch: float) -> str:
    for threshold, label in READING_LEVELS:
        if flesch >= threshold:
            return label
    return HARDEST_READING_LEVEL


@dataclass
class ReadabilityMetrics:
    flesch_reading_ease: float
    reading_level: str
    sentence_count: int
    word_count: int
    average_sentence_length: float
    average_syllables_per_word: float
    complex_word_percentage: float
    complex_words: List[Dict[str, Any]] = field(default_factory=list)
    longest_sentences: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def calculate_readability(text: str) -> ReadabilityMetrics:
    """
    Flesch Reading Ease plus the supporting sentence and word statistics

    The score is clamped to [0, 100]. Callers must ensure the text contains
    at least one word.
    """
    sentences = [s.strip() for s in SENTENCE_SPLIT.split(text) if s.strip()]
    words = WORD_PATTERN.findall(text.lower())
    sentence_count = max(1, len(sentences))
    word_count = len(words)

    total_syllables = 0
    complex_words = []
    for word in words:
        syllables = count_syllables(word)
        total_syllables += syllables
        if syllables >= 3 and len(word) > 6:
            complex_words.append({"word": word, "syllables": syllables})

    words_per_sentence = word_count / sentence_count
    syllables_per_word = total_syllables / word_count
    flesch = 206.835 - 1.015 * words_per_sentence - 84.6 * syllables_per_word
    flesch = max(0.0, min(100.0, flesch))

    longest = sorted(
        ({"text": s, "word_count": len(s.split())} for s in sentences),
        key=lambda s: s["word_count"],
        reverse=True,
    )

    return ReadabilityMetrics(
        flesch_reading_ease=flesch,
        reading_level=reading_level(flesch),
        sentence_count=len(sentences),
        word_count=word_count,
        average_sentence_length=words_per_sentence,
        average_syllables_per_word=syllables_per_word,
        complex_word_percentage=len(complex_words) / word_count * 100,
        complex_words=complex_words[:20],
        longest_sentences=longest[:5],
    )


def detect_jargon(text: str) -> List[str]:
    lowered = text.lower()
    return [term for term in JARGON_TERMS if term.lower() in lowered]


def find_time_limits(sources: Dict[str, Any]) -> List[Dict[str, Any]]:
    found = []
    for content in sources.get("scripts") or []:
        if any(marker in content for marker in TIME_LIMIT_MARKERS):
            found.append({"type": "JavaScript timeout detected", "preview": content[:100]})
    if sources.get("metaRefresh"):
        found.append({"type": "Meta refresh detected", "content": sources["metaRefresh"]})
    return found


class ReadabilityAnalyzer(BaseAnalyzer):
    """Cognitive accessibility checks (WCAG 3.1.3, 3.1.4, 3.1.5, 2.2.1)"""

    @property
    def name(self) -> str:
        return "cognitive-checker"

    def text_issues(self, text: str, metrics: ReadabilityMetrics) -> List[Issue]:
        issues = []
        flesch = metrics.flesch_reading_ease

        if flesch < TARGET_FLESCH:
            issues.append(
                Issue(
                    tool=self.name,
                    type="difficult-reading-level",
                    severity=Severity.SERIOUS if flesch < VERY_DIFFICULT_FLESCH else Severity.MODERATE,
                    description=f"Text is difficult to read (Flesch score: {flesch:.1f})",
                    wcag_tags=("3.1.5",),
                    evidence={
                        "detail": f"Reading level: {metrics.reading_level}",
                        "current_score": round(flesch, 1),
                        "target_score": f"{TARGET_FLESCH}+",
                        "suggestion": "Simplify sentences and use common words. Target Flesch score: 60+",
                    },
                )
            )

        if metrics.average_sentence_length > MAX_AVERAGE_SENTENCE_LENGTH:
            issues.append(
                Issue(
                    tool=self.name,
                    type="long-sentences",
                    severity=Severity.MODERATE,
                    description=f"Sentences are too long (average: {metrics.average_sentence_length:.1f} words)",
                    wcag_tags=("3.1.5",),
                    evidence={
                        "longest_sentences": metrics.longest_sentences[:3],
                        "suggestion": "Break long sentences into shorter ones. Target: 15-20 words per sentence",
                    },
                )
            )

        if metrics.complex_word_percentage > MAX_COMPLEX_WORD_PERCENTAGE:
            issues.append(
                Issue(
                    tool=self.name,
                    type="complex-vocabulary",
                    severity=Severity.MODERATE,
                    description=f"{metrics.complex_word_percentage:.1f}% of words are complex (3+ syllables)",
                    wcag_tags=("3.1.5",),
                    evidence={
                        "examples": metrics.complex_words[:10],
                        "suggestion": "Use simpler alternatives for complex words. Target: <10% complex words",
                    },
                )
            )

        jargon = detect_jargon(text)
        if jargon:
            issues.append(
                Issue(
                    tool=self.name,
                    type="jargon-detected",
                    severity=Severity.MINOR,
                    description=f"Technical jargon found ({len(jargon)} terms)",
                    wcag_tags=("3.1.3", "3.1.4"),
                    evidence={"terms": jargon, "suggestion": "Provide definitions or simpler alternatives"},
                )
            )

        return issues

    async def analyze(self, page: PageHandle, context: AnalysisContext) -> AnalyzerResult:
        text = await page.evaluate(MAIN_TEXT_SCRIPT) or ""

        if len(text) < MIN_TEXT_LENGTH or not WORD_PATTERN.search(text.lower()):
            logger.info(f"Readability: insufficient content on {context.url}")
            return AnalyzerResult(tool=self.name, message="Insufficient text content to analyze")

        metrics = calculate_readability(text)
        issues = self.text_issues(text, metrics)

        try:
            time_limits = find_time_limits(await page.evaluate(TIME_LIMIT_SOURCES_SCRIPT) or {})
        except Exception as e:
            logger.warning(f"Time limit check failed: {e}")
            time_limits = []

        if time_limits:
            issues.append(
                Issue(
                    tool=self.name,
                    type="time-limits",
                    severity=Severity.SERIOUS,
                    description="Time limits detected - may trap users who need more time",
                    wcag_tags=("2.2.1",),
                    evidence={
                        "details": time_limits,
                        "suggestion": "Allow users to extend, adjust, or disable time limits",
                    },
                )
            )

        return AnalyzerResult(
            tool=self.name,
            issues=issues,
            summary={
                "reading_level": metrics.reading_level,
                "flesch_score": round(metrics.flesch_reading_ease, 1),
                "average_sentence_length": round(metrics.average_sentence_length, 1),
                "complex_word_percentage": round(metrics.complex_word_percentage, 1),
                "jargon_terms": len(detect_jargon(text)),
            },
            data={"metrics": metrics.to_dict()},
        )
