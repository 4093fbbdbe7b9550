"""Tests for the optional MLflow tracing wrapper."""

from __future__ import annotations

from unittest.mock import MagicMock

import study_buddy_mcp.tracing as tracing_mod


class TestTraceDisabled:
    def test_identity_without_mlflow(self, monkeypatch):
        monkeypatch.setattr(tracing_mod, "_HAS_MLFLOW", False)

        def tool():
            return 1

        assert tracing_mod.trace(tool) is tool
        assert tracing_mod.trace(name="x", span_type="TOOL")(tool) is tool

    def test_identity_when_config_disables(self, monkeypatch):
        monkeypatch.setattr(tracing_mod, "_HAS_MLFLOW", True)
        monkeypatch.setenv("GEMINI_TRACING_ENABLED", "false")
        assert tracing_mod.is_enabled() is False

    def test_setup_and_shutdown_noop_when_disabled(self, monkeypatch):
        fake = MagicMock()
        monkeypatch.setattr(tracing_mod, "_HAS_MLFLOW", False)
        monkeypatch.setattr(tracing_mod, "mlflow", fake, raising=False)
        tracing_mod.setup()
        tracing_mod.shutdown()
        fake.set_tracking_uri.assert_not_called()


class TestTraceEnabled:
    def test_setup_configures_mlflow(self, monkeypatch):
        fake = MagicMock()
        monkeypatch.setattr(tracing_mod, "_HAS_MLFLOW", True)
        monkeypatch.setattr(tracing_mod, "mlflow", fake, raising=False)
        monkeypatch.setenv("GEMINI_TRACING_ENABLED", "")
        monkeypatch.setenv("MLFLOW_TRACKING_URI", "http://mlflow.local")

        tracing_mod.setup()

        fake.set_tracking_uri.assert_called_once_with("http://mlflow.local")
        fake.set_experiment.assert_called_once_with("study-buddy-mcp")
        fake.gemini.autolog.assert_called_once()

    def test_setup_failure_is_logged_not_raised(self, monkeypatch, caplog):
        fake = MagicMock()
        fake.set_tracking_uri.side_effect = RuntimeError("unreachable")
        monkeypatch.setattr(tracing_mod, "_HAS_MLFLOW", True)
        monkeypatch.setattr(tracing_mod, "mlflow", fake, raising=False)
        monkeypatch.setenv("GEMINI_TRACING_ENABLED", "")
        monkeypatch.setenv("MLFLOW_TRACKING_URI", "http://mlflow.local")

        tracing_mod.setup()

        assert "tracing setup failed" in caplog.text
