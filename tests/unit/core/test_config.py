"""
Tests for settings loading and validation
"""
import pytest
from pydantic import ValidationError

from core.config import Settings, get_settings

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Clear the settings cache before each test"""
    get_settings.cache_clear()


class TestSettings:
    def test_default_settings(self, monkeypatch):
        """Defaults cover browser, audit and store configuration"""
        for name in ("ENVIRONMENT", "DEFAULT_WCAG_LEVEL", "STORE_MAX_ENTRIES", "HEADLESS"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)
        assert settings.environment == "development"
        assert settings.default_browser == "chromium"
        assert settings.headless is True
        assert settings.default_wcag_level == "AA"
        assert settings.default_audit_mode == "full"
        assert settings.keyboard_max_tabs == 50
        assert settings.emergency_small_text_severity == "critical"
        assert settings.store_max_entries == 0
        assert settings.is_development is True
        assert settings.is_production is False

    def test_invalid_environment_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            Settings(_env_file=None, environment="qa")
        assert "Environment must be one of" in str(exc_info.value)

    def test_wcag_level_is_normalized(self):
        """Lowercase levels are accepted and upper-cased"""
        settings = Settings(_env_file=None, default_wcag_level="aaa")
        assert settings.default_wcag_level == "AAA"

    def test_invalid_wcag_level_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, default_wcag_level="AAAA")

    def test_emergency_severity_validated(self):
        assert Settings(_env_file=None, emergency_small_text_severity="Serious").emergency_small_text_severity == "serious"
        with pytest.raises(ValidationError):
            Settings(_env_file=None, emergency_small_text_severity="blocker")

    def test_negative_store_capacity_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, store_max_entries=-1)

    def test_environment_variables_override_defaults(self, monkeypatch):
        monkeypatch.setenv("HEADLESS", "false")
        monkeypatch.setenv("DEFAULT_AUDIT_MODE", "summary")
        monkeypatch.setenv("STORE_MAX_ENTRIES", "25")

        settings = get_settings()
        assert settings.headless is False
        assert settings.default_audit_mode == "summary"
        assert settings.store_max_entries == 25

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
