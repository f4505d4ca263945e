"""Tests for server configuration."""

from shopsense_server.config import Settings


def test_tracking_settings_are_nested(monkeypatch):
    """GIVEN SHOPSENSE_* variables SHOULD load them into the nested tracking settings."""
    monkeypatch.setenv("SHOPSENSE_TRACKING_ID", "UA-9-9")
    monkeypatch.setenv("SHOPSENSE_TRACK_USER_ID", "true")
    monkeypatch.setenv("DATABASE_URL", "postgresql://db/shop")

    settings = Settings(_env_file=None)

    assert settings.database_url == "postgresql://db/shop"
    assert settings.tracking.tracking_id == "UA-9-9"
    assert settings.tracking.track_user_id is True
    assert settings.tracking.is_configured


def test_pool_defaults():
    settings = Settings(_env_file=None)
    assert (settings.pool_min_size, settings.pool_max_size) == (1, 10)
    assert settings.create_schema is True
