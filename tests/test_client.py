"""Tests for GeminiClient request wiring and response handling."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from google.genai import types

from study_buddy_mcp.client import GeminiClient, _resolve_thinking_level
from study_buddy_mcp.config import update_config


def _response(*parts: types.Part) -> MagicMock:
    response = MagicMock()
    response.candidates = [MagicMock(content=types.Content(role="model", parts=list(parts)))]
    response.text = None
    return response


@pytest.fixture()
def fake_client():
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock()
    with patch.object(GeminiClient, "get", return_value=client):
        yield client


class TestGenerate:
    @pytest.mark.asyncio
    async def test_structured_output_config(self, fake_client):
        fake_client.aio.models.generate_content.return_value = _response(types.Part(text='{"a": 1}'))
        schema = {"type": "object"}

        raw = await GeminiClient.generate(
            [types.Part(text="hi")], response_schema=schema, system_instruction="be nice",
        )

        assert raw == '{"a": 1}'
        kwargs = fake_client.aio.models.generate_content.call_args.kwargs
        config = kwargs["config"]
        assert kwargs["model"] == "gemini-3-flash-preview"
        assert config.response_mime_type == "application/json"
        assert config.response_json_schema == schema
        assert config.system_instruction == "be nice"

    @pytest.mark.asyncio
    async def test_uses_live_config(self, fake_client):
        update_config(default_model="gemini-custom", default_thinking_level="high", default_temperature=0.2)
        fake_client.aio.models.generate_content.return_value = _response(types.Part(text="ok"))

        await GeminiClient.generate("prompt")

        kwargs = fake_client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-custom"
        assert kwargs["config"].temperature == 0.2
        assert kwargs["config"].system_instruction is None

    @pytest.mark.asyncio
    async def test_thought_parts_stripped(self, fake_client):
        fake_client.aio.models.generate_content.return_value = _response(
            types.Part(text="thinking...", thought=True),
            types.Part(text="answer"),
        )
        assert await GeminiClient.generate("prompt") == "answer"

    @pytest.mark.asyncio
    async def test_no_candidates_falls_back_to_text(self, fake_client):
        response = MagicMock(candidates=[], text="fallback")
        fake_client.aio.models.generate_content.return_value = response
        assert await GeminiClient.generate("prompt") == "fallback"

    @pytest.mark.asyncio
    async def test_errors_propagate_without_retry(self, fake_client):
        fake_client.aio.models.generate_content.side_effect = RuntimeError("429 quota")
        with pytest.raises(RuntimeError):
            await GeminiClient.generate("prompt")
        assert fake_client.aio.models.generate_content.await_count == 1


class TestClientPool:
    def test_missing_key(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY")
        with pytest.raises(ValueError, match="No Gemini API key"):
            GeminiClient.get()

    def test_one_client_per_key(self):
        with patch("study_buddy_mcp.client.genai.Client") as ctor:
            GeminiClient._clients.clear()
            first = GeminiClient.get("key-1234")
            assert GeminiClient.get("key-1234") is first
            assert ctor.call_count == 1
            GeminiClient._clients.clear()

    @pytest.mark.asyncio
    async def test_close_all(self):
        GeminiClient._clients.clear()
        client = MagicMock()
        client.aio.aclose = AsyncMock()
        GeminiClient._clients["k"] = client
        assert await GeminiClient.close_all() == 1
        assert GeminiClient._clients == {}


class TestThinkingLevel:
    def test_normalizes(self):
        assert _resolve_thinking_level(" High ") == "high"

    def test_rejects_unknown(self):
        with pytest.raises(ValueError, match="Invalid thinking level"):
            _resolve_thinking_level("max")
