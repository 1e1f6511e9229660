"""
Configuration management using Pydantic Settings
Handles environment variables and validation
"""
from functools import lru_cache
from typing import Optional

from pydantic import ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings

WCAG_LEVELS = ("A", "AA", "AAA")
SEVERITY_LABELS = ("critical", "serious", "moderate", "minor")
WAIT_UNTIL_EVENTS = ("load", "domcontentloaded", "networkidle", "commit")


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Environment
    environment: str = Field(default="development")
    debug: bool = Field(default=False)

    # Application
    app_name: str = "AccessAudit"
    app_version: str = "0.1.0"

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")  # json or text

    # Browser automation
    default_browser: str = Field(default="chromium")
    browser_config_path: Optional[str] = Field(default=None, description="Unset means the bundled browsers.yaml")
    headless: bool = Field(default=True)
    navigation_timeout_ms: int = Field(default=30000, ge=1000)
    navigation_wait_until: str = Field(default="networkidle")

    # Generic detectors
    axe_script_path: Optional[str] = Field(default=None, description="Local axe.min.js, preferred over the CDN")
    axe_script_url: str = Field(default="https://cdnjs.cloudflare.com/ajax/libs/axe-core/4.10.2/axe.min.js")
    pa11y_command: str = Field(default="pa11y")
    pa11y_timeout_ms: int = Field(default=30000)
    pa11y_wait_ms: int = Field(default=1000)

    # Audit defaults
    default_wcag_level: str = Field(default="AA")
    default_audit_mode: str = Field(default="full")
    keyboard_max_tabs: int = Field(default=50, ge=1)
    focus_indicator_sample: int = Field(default=10, ge=1)
    emergency_small_text_severity: str = Field(default="critical")

    # In-memory audit/score stores; 0 keeps every record for the process lifetime
    store_max_entries: int = Field(default=0, ge=0)

    # Monitoring
    prometheus_enabled: bool = Field(default=True)

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        allowed = ["development", "test", "staging", "production"]
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        if v not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v

    @field_validator("default_wcag_level")
    @classmethod
    def validate_wcag_level(cls, v):
        v = v.upper()
        if v not in WCAG_LEVELS:
            raise ValueError(f"WCAG level must be one of: {list(WCAG_LEVELS)}")
        return v

    @field_validator("default_audit_mode")
    @classmethod
    def validate_audit_mode(cls, v):
        if v not in ("summary", "full"):
            raise ValueError("Audit mode must be 'summary' or 'full'")
        return v

    @field_validator("emergency_small_text_severity")
    @classmethod
    def validate_severity(cls, v):
        v = v.lower()
        if v not in SEVERITY_LABELS:
            raise ValueError(f"Severity must be one of: {list(SEVERITY_LABELS)}")
        return v

    @field_validator("navigation_wait_until")
    @classmethod
    def validate_wait_until(cls, v):
        if v not in WAIT_UNTIL_EVENTS:
            raise ValueError(f"Wait-until event must be one of: {list(WAIT_UNTIL_EVENTS)}")
        return v

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Global settings instance
settings = get_settings()
