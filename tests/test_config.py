"""Tests for the config module."""

from pathlib import Path

import pytest

from meal_planner.config import (
    API_KEY_ENV,
    DATABASE_ENV,
    DEFAULT_DATABASE_FILE,
    ConfigurationError,
    get_api_key,
    get_database_path,
    require_api_key,
)


@pytest.fixture
def clear_env(monkeypatch):
    """Clear any configuration from the environment."""
    monkeypatch.delenv(API_KEY_ENV, raising=False)
    monkeypatch.delenv(DATABASE_ENV, raising=False)


class TestApiKey:
    """Tests for API key lookup."""

    def test_from_environment(self, clear_env, monkeypatch):
        monkeypatch.setenv(API_KEY_ENV, "abc123")

        assert get_api_key() == "abc123"
        assert require_api_key() == "abc123"

    def test_missing(self, clear_env):
        assert get_api_key() is None

    def test_empty_treated_as_missing(self, clear_env, monkeypatch):
        monkeypatch.setenv(API_KEY_ENV, "")

        assert get_api_key() is None

    def test_require_names_variable(self, clear_env):
        with pytest.raises(ConfigurationError) as exc_info:
            require_api_key()

        assert "TASTY_API_KEY" in str(exc_info.value)
        assert ".env" in str(exc_info.value)


class TestDatabasePath:
    """Tests for database path resolution."""

    def test_default(self, clear_env):
        assert get_database_path() == DEFAULT_DATABASE_FILE
        assert DEFAULT_DATABASE_FILE.name == "database.db"
        assert DEFAULT_DATABASE_FILE.parent.name == ".meal-planner"

    def test_override(self, clear_env, monkeypatch, tmp_path):
        monkeypatch.setenv(DATABASE_ENV, str(tmp_path / "other.db"))

        assert get_database_path() == tmp_path / "other.db"

    def test_override_expands_user(self, clear_env, monkeypatch):
        monkeypatch.setenv(DATABASE_ENV, "~/meals.db")

        assert get_database_path() == Path("~/meals.db").expanduser()
