"""
D0 Browser Types

Browser targets, launch configuration and navigation results shared by the
browser manager and the audit coordinator.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from d0_browser.page import PageHandle


class BrowserTarget(Enum):
    """Browser engines an audit can run against"""

    CHROMIUM = "chromium"
    FIREFOX = "firefox"
    WEBKIT = "webkit"

    @classmethod
    def from_value(cls, value: str) -> "BrowserTarget":
        try:
            return cls(value.lower())
        except (ValueError, AttributeError):
            raise ValueError(f"Unsupported browser: {value}. Expected one of: {[t.value for t in cls]}")


@dataclass
class BrowserConfig:
    """Launch configuration for one browser target"""

    target: BrowserTarget
    enabled: bool = True
    args: List[str] = field(default_factory=list)
    executable_path: Optional[str] = None

    @classmethod
    def from_dict(cls, target: BrowserTarget, data: Dict[str, Any]) -> "BrowserConfig":
        return cls(
            target=target,
            enabled=bool(data.get("enabled", True)),
            args=list(data.get("args") or []),
            executable_path=data.get("executable_path"),
        )


@dataclass
class NavigationResult:
    """Outcome of loading a URL; failures are reported, not raised"""

    page: Optional["PageHandle"]
    success: bool
    error: Optional[str] = None
