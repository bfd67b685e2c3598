"""Tests for configuration defaults and env overrides."""

from __future__ import annotations

from workledger.core.config import AppSettings, StoreConfig


def test_default_settings():
    settings = AppSettings()
    assert settings.environment == "dev"
    assert settings.log_level == "INFO"
    assert settings.store.credential is None


def test_store_config_defaults():
    config = StoreConfig()
    assert config.host == "localhost"
    assert config.port == 6379
    assert config.db == 0
    assert config.endpoint == "localhost:6379"


def test_store_config_env_override(monkeypatch):
    monkeypatch.setenv("WORKLEDGER_STORE_HOST", "redis.internal")
    monkeypatch.setenv("WORKLEDGER_STORE_PORT", "6380")
    monkeypatch.setenv("WORKLEDGER_STORE_CREDENTIAL", "s3cret")
    config = StoreConfig()
    assert config.endpoint == "redis.internal:6380"
    assert config.credential == "s3cret"
