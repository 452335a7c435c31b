"""Tests for configuration defaults and env overrides."""

from __future__ import annotations

from assetledger.core.config import AppSettings, ImportConfig
from assetledger.persistence import create_persistence
from assetledger.persistence.memory_backend import MemoryRecordStore


def test_default_settings():
    settings = AppSettings()
    assert settings.environment == "dev"
    assert settings.storage_backend == "memory"
    assert settings.imports.preview_row_limit == 10


def test_import_config_env_override(monkeypatch):
    monkeypatch.setenv("ASSETLEDGER_IMPORT_PREVIEW_TTL_SECONDS", "120")
    assert ImportConfig().preview_ttl_seconds == 120


def test_app_settings_env_override(monkeypatch):
    monkeypatch.setenv("ASSETLEDGER_LOG_FORMAT", "json")
    assert AppSettings().log_format == "json"


def test_memory_persistence_by_default():
    persistence = create_persistence(AppSettings())
    assert isinstance(persistence.records, MemoryRecordStore)
