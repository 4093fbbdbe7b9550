"""Shared test fixtures for study-buddy-mcp."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest


@pytest.fixture(autouse=True)
def _set_dummy_api_key(monkeypatch):
    """Ensure tests never hit real Gemini API."""
    monkeypatch.setenv("GEMINI_API_KEY", "test-key-not-real")


@pytest.fixture(autouse=True)
def _disable_tracing(monkeypatch):
    """Disable MLflow tracing in all tests to avoid real tracking-server calls."""
    monkeypatch.setenv("GEMINI_TRACING_ENABLED", "false")


@pytest.fixture(autouse=True)
def _isolate_env_file(tmp_path, monkeypatch):
    """Prevent tests from loading the user's real ~/.config/study-buddy-mcp/.env."""
    monkeypatch.setattr(
        "study_buddy_mcp.config.DEFAULT_ENV_PATH",
        tmp_path / "nonexistent.env",
    )


@pytest.fixture(autouse=True)
def clean_config():
    """Reset the config singleton between tests."""
    import study_buddy_mcp.config as cfg_mod

    cfg_mod._config = None
    yield
    cfg_mod._config = None


@pytest.fixture()
def mock_gemini_client():
    """Patch GeminiClient.get() and .generate() for unit tests."""
    with (
        patch("study_buddy_mcp.client.GeminiClient.get") as mock_get,
        patch(
            "study_buddy_mcp.client.GeminiClient.generate", new_callable=AsyncMock
        ) as mock_gen,
    ):
        client = MagicMock()
        mock_get.return_value = client
        yield {
            "get": mock_get,
            "generate": mock_gen,
            "client": client,
        }


def make_analysis_payload(n_terms: int = 5, n_questions: int = 3, answer: str = "C") -> dict:
    """Build a response body that conforms to the study-guide schema."""
    return {
        "summary": "Photosynthesis turns light into chemical energy. It happens in chloroplasts.",
        "keyTerms": [
            {"term": f"Term {i}", "definition": f"Definition of term {i}"}
            for i in range(n_terms)
        ],
        "questions": [
            {
                "question": f"Question {i}?",
                "options": ["first", "second", "third", "fourth"],
                "answer": answer,
            }
            for i in range(n_questions)
        ],
        "encouragement": "You're doing great — keep going!",
    }


@pytest.fixture()
def analysis_factory():
    """Factory for conforming payloads with custom sizes or answer letter."""
    return make_analysis_payload


@pytest.fixture()
def analysis_payload() -> dict:
    return make_analysis_payload()


@pytest.fixture()
def analysis_json(analysis_payload) -> str:
    return json.dumps(analysis_payload)


@pytest.fixture(autouse=True, scope="session")
def _unwrap_fastmcp_tools():
    """Patch tool modules so FunctionTool objects become directly callable.

    Tests call tools through their module (``study_tools.study_submit``) so
    the unwrapped function is picked up regardless of FastMCP version.
    """
    import importlib
    import pkgutil

    import study_buddy_mcp.tools as tools_pkg

    for info in pkgutil.walk_packages(tools_pkg.__path__, tools_pkg.__name__ + "."):
        mod = importlib.import_module(info.name)
        for name in list(vars(mod)):
            obj = getattr(mod, name, None)
            if obj is not None and hasattr(obj, "fn") and not callable(obj):
                setattr(mod, name, obj.fn)
