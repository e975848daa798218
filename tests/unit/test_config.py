"""Tests for configuration validation"""
import pytest

from fitquest import config


class TestConfigValidation:
    """Test validate_config against module settings"""

    def test_defaults_are_valid(self, monkeypatch):
        """Test the default configuration passes validation"""
        monkeypatch.setattr(config, "STORE_BACKEND", "memory")
        monkeypatch.setattr(config, "STREAK_POLICY", "lenient")
        monkeypatch.setattr(config, "GAMIFICATION_TIMEZONE", "UTC")
        monkeypatch.setattr(config, "LOG_LEVEL", "INFO")

        config.validate_config()

    def test_unknown_backend(self, monkeypatch):
        """Test an unknown store backend is rejected"""
        monkeypatch.setattr(config, "STORE_BACKEND", "redis")

        with pytest.raises(ValueError) as exc_info:
            config.validate_config()

        assert "STORE_BACKEND" in str(exc_info.value)

    def test_postgres_requires_url(self, monkeypatch):
        """Test postgres backend needs DATABASE_URL"""
        monkeypatch.setattr(config, "STORE_BACKEND", "postgres")
        monkeypatch.setattr(config, "DATABASE_URL", "")

        with pytest.raises(ValueError) as exc_info:
            config.validate_config()

        assert "DATABASE_URL" in str(exc_info.value)

    def test_unknown_streak_policy(self, monkeypatch):
        """Test an unknown streak policy is rejected"""
        monkeypatch.setattr(config, "STORE_BACKEND", "memory")
        monkeypatch.setattr(config, "STREAK_POLICY", "strict")

        with pytest.raises(ValueError) as exc_info:
            config.validate_config()

        assert "STREAK_POLICY" in str(exc_info.value)

    def test_invalid_log_level(self, monkeypatch):
        """Test an invalid log level is rejected"""
        monkeypatch.setattr(config, "STORE_BACKEND", "memory")
        monkeypatch.setattr(config, "STREAK_POLICY", "consecutive")
        monkeypatch.setattr(config, "LOG_LEVEL", "VERBOSE")

        with pytest.raises(ValueError):
            config.validate_config()

    def test_lowercase_log_level_accepted(self, monkeypatch):
        """Test log level is case insensitive"""
        monkeypatch.setattr(config, "STORE_BACKEND", "memory")
        monkeypatch.setattr(config, "STREAK_POLICY", "lenient")
        monkeypatch.setattr(config, "GAMIFICATION_TIMEZONE", "UTC")
        monkeypatch.setattr(config, "LOG_LEVEL", "debug")

        config.validate_config()

    def test_unknown_timezone(self, monkeypatch):
        """Test an unknown GAMIFICATION_TIMEZONE is rejected"""
        monkeypatch.setattr(config, "STORE_BACKEND", "memory")
        monkeypatch.setattr(config, "STREAK_POLICY", "lenient")
        monkeypatch.setattr(config, "GAMIFICATION_TIMEZONE", "Not/AZone")

        with pytest.raises(ValueError) as exc_info:
            config.validate_config()

        assert "GAMIFICATION_TIMEZONE" in str(exc_info.value)

    def test_known_timezone_accepted(self, monkeypatch):
        """Test an IANA timezone name passes validation"""
        monkeypatch.setattr(config, "STORE_BACKEND", "memory")
        monkeypatch.setattr(config, "STREAK_POLICY", "lenient")
        monkeypatch.setattr(config, "GAMIFICATION_TIMEZONE", "Europe/Berlin")
        monkeypatch.setattr(config, "LOG_LEVEL", "INFO")

        config.validate_config()


class TestServiceTimezone:
    """Test the service resolves its timezone up front"""

    def test_unknown_timezone_fails_at_construction(self, memory_store):
        """Test a bad timezone name raises before any recorder call"""
        from fitquest.exceptions import ConfigurationError
        from fitquest.services.gamification_service import GamificationService

        with pytest.raises(ConfigurationError) as exc_info:
            GamificationService(memory_store, tz_name="Not/AZone")

        assert exc_info.value.config_key == "GAMIFICATION_TIMEZONE"

    def test_default_timezone_from_config(self, memory_store, monkeypatch):
        """Test the configured timezone is used when none is passed"""
        from zoneinfo import ZoneInfo
        from fitquest.services.gamification_service import GamificationService

        monkeypatch.setattr(config, "GAMIFICATION_TIMEZONE", "Asia/Tokyo")

        service = GamificationService(memory_store)

        assert service.tz == ZoneInfo("Asia/Tokyo")
