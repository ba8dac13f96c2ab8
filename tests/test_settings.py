"""Tests for environment-driven configuration."""

import pytest
from pathlib import Path

from journal_progress.config import (
    AppSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "JOURNAL_STORAGE_BACKEND",
        "JOURNAL_STORAGE_DATA_PATH",
        "JOURNAL_STORAGE_AUDIT_PATH",
        "TIMEZONE",
        "AUDIT_ENABLED",
        "DEBUG_MODE",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestStorageSettings:

    def test_defaults(self):
        settings = StorageSettings()
        assert settings.backend == "memory"
        assert settings.data_path == Path("data/progress.json")
        assert settings.audit_path == Path("data/audit.jsonl")

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("JOURNAL_STORAGE_BACKEND", "json")
        monkeypatch.setenv("JOURNAL_STORAGE_DATA_PATH", "/tmp/progress.json")
        settings = StorageSettings()
        assert settings.backend == "json"
        assert settings.data_path == Path("/tmp/progress.json")

    def test_rejects_unknown_backend(self, monkeypatch):
        monkeypatch.setenv("JOURNAL_STORAGE_BACKEND", "sqlite")
        with pytest.raises(ValueError):
            StorageSettings()


class TestAppSettings:

    def test_defaults(self):
        settings = AppSettings()
        assert settings.timezone is None
        assert settings.tzinfo is None
        assert settings.audit_enabled is True

    def test_timezone(self, monkeypatch):
        monkeypatch.setenv("TIMEZONE", "Asia/Tokyo")
        settings = AppSettings()
        assert settings.tzinfo is not None
        assert str(settings.tzinfo) == "Asia/Tokyo"

    def test_blank_timezone_means_system_zone(self, monkeypatch):
        monkeypatch.setenv("TIMEZONE", "  ")
        assert AppSettings().timezone is None

    def test_unknown_timezone(self, monkeypatch):
        monkeypatch.setenv("TIMEZONE", "Mars/Olympus_Mons")
        with pytest.raises(ValueError, match="Unknown timezone"):
            AppSettings()


class TestValidateAllSettings:

    def test_all_valid(self):
        assert validate_all_settings() == {"storage": True, "app": True}

    def test_reports_broken_section(self, monkeypatch):
        monkeypatch.setenv("TIMEZONE", "Nowhere/Special")
        results = validate_all_settings()
        assert results["storage"] is True
        assert results["app"] is False
        assert "Unknown timezone" in results["app_error"]

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
