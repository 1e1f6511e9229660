"""
Base analyzer class for all page analyses
"""

from abc import ABC, abstractmethod

from d0_browser.page import PageHandle
from d3_assessment.models import AnalysisContext, AnalyzerResult


class BaseAnalyzer(ABC):
    """Abstract base class for all analyzers"""

    @property
    @abstractmethod
    def name(self) -> str:
        """Tool name stamped on every issue this analyzer produces"""

    @abstractmethod
    async def analyze(self, page: PageHandle, context: AnalysisContext) -> AnalyzerResult:
        """
        Run the analysis against a loaded page

        Args:
            page: Handle to the rendered page
            context: URL, WCAG level and per-call options

        Returns:
            AnalyzerResult with the issues found
        """

    def is_available(self) -> bool:
        """Check if this analyzer can run (external tools installed, etc)"""
        return True
