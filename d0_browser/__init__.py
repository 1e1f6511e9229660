"""
D0 Browser - Page automation for audits

Every DOM read, key press and navigation goes through this package.
"""

from .manager import BrowserManager
from .page import PageHandle
from .types import BrowserConfig, BrowserTarget, NavigationResult

__all__ = [
    "BrowserManager",
    "PageHandle",
    "BrowserConfig",
    "BrowserTarget",
    "NavigationResult",
]
