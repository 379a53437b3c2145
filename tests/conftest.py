"""Shared fixtures for the journal-analytics test suite."""

from __future__ import annotations

import time

import pytest

from journal_analytics.core.config import Settings
from journal_analytics.storage.preset_store import InMemoryPresetStore


@pytest.fixture
def settings() -> Settings:
    """Default settings with no TOML file and no env overrides."""
    return Settings()


@pytest.fixture
def memory_store() -> InMemoryPresetStore:
    return InMemoryPresetStore()


@pytest.fixture
def presets_path(tmp_path):
    return tmp_path / "presets" / "filter_presets.jsonl"


@pytest.fixture
def new_york_local_time(monkeypatch):
    """Run with the process local zone at UTC-5 (POSIX rule, no zone database)."""
    monkeypatch.setenv("TZ", "EST+05")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()
