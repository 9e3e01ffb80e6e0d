"""Tests for settings loading."""

from hrms_payroll.config import Settings


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///payroll.db")
    monkeypatch.setenv("PORT", "9001")
    monkeypatch.setenv("DEBUG", "TRUE")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("EMPLOYEE_DIRECTORY_URL", "http://hr.internal")
    monkeypatch.setenv("EMPLOYEE_DIRECTORY_TIMEOUT", "2.5")

    settings = Settings.from_env()

    assert settings.database_url == "sqlite+aiosqlite:///payroll.db"
    assert settings.port == 9001
    assert settings.debug is True
    assert settings.log_level == "DEBUG"
    assert settings.employee_directory_url == "http://hr.internal"
    assert settings.employee_directory_timeout == 2.5


def test_empty_directory_url_means_unset(monkeypatch):
    monkeypatch.setenv("EMPLOYEE_DIRECTORY_URL", "")
    assert Settings.from_env().employee_directory_url is None
