"""Tests for structured logging setup and run ids."""

import pytest

from journal_analytics.core.config import ObservabilityConfig
from journal_analytics.core.errors import ConfigError
from journal_analytics.observability.logger import (
    _add_run_id,
    analytics_run,
    configure_from_settings,
    get_logger,
    get_run_id,
    new_run_id,
    setup_logging,
)


class TestRunId:
    def test_new_run_id_changes_current(self):
        first = new_run_id()
        assert get_run_id() == first
        second = new_run_id()
        assert second != first
        assert get_run_id() == second

    def test_processor_adds_run_id(self):
        rid = new_run_id()
        event = _add_run_id(None, "info", {"event": "x"})
        assert event == {"event": "x", "run_id": rid}

    def test_analytics_run_scopes_id(self):
        outer = new_run_id()
        with analytics_run() as rid:
            assert rid != outer
            assert get_run_id() == rid
        assert get_run_id() == outer

    def test_analytics_run_restores_on_error(self):
        outer = new_run_id()
        with pytest.raises(RuntimeError):
            with analytics_run():
                raise RuntimeError("boom")
        assert get_run_id() == outer


class TestSetupLogging:
    def test_console_format(self):
        setup_logging(level="DEBUG", format="console")
        assert get_logger("journal_analytics.test") is not None

    def test_unknown_format(self):
        with pytest.raises(ConfigError, match="Unknown log format"):
            setup_logging(format="xml")

    def test_from_settings(self):
        configure_from_settings(ObservabilityConfig(log_level="warning", log_format="json"))
        log = get_logger("journal_analytics.test")
        log.warning("preset_store_recovered", path="presets.jsonl")  # Should not raise
