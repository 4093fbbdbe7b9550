"""Tests for the one-shot analysis call and its validation boundary."""

from __future__ import annotations

import json

import httpx
import pytest

from study_buddy_mcp.analysis import AnalysisFailure, AnalysisSuccess, analyze
from study_buddy_mcp.errors import ANALYSIS_FAILED_MESSAGE
from study_buddy_mcp.models.content import TextContent
from study_buddy_mcp.request_builder import build_request


@pytest.fixture()
def request_():
    return build_request(TextContent(text="Cells are the basic unit of life."))


class TestAnalyze:
    @pytest.mark.asyncio
    async def test_success(self, mock_gemini_client, analysis_json, request_):
        mock_gemini_client["generate"].return_value = analysis_json

        outcome = await analyze(request_)

        assert isinstance(outcome, AnalysisSuccess)
        assert len(outcome.result.questions) == 3
        call = mock_gemini_client["generate"].call_args
        assert call.args[0] == list(request_.parts)
        assert call.kwargs["response_schema"] == request_.response_schema
        assert call.kwargs["system_instruction"] == request_.system_instruction

    @pytest.mark.asyncio
    async def test_single_call_no_retry(self, mock_gemini_client, request_):
        mock_gemini_client["generate"].side_effect = httpx.ReadTimeout("timed out")

        outcome = await analyze(request_)

        assert isinstance(outcome, AnalysisFailure)
        assert mock_gemini_client["generate"].await_count == 1

    @pytest.mark.asyncio
    async def test_transport_failure_is_generic(self, mock_gemini_client, request_):
        cause = httpx.ConnectError("connection refused")
        mock_gemini_client["generate"].side_effect = cause

        outcome = await analyze(request_)

        assert str(outcome.error) == ANALYSIS_FAILED_MESSAGE
        assert outcome.error.__cause__ is cause

    @pytest.mark.asyncio
    async def test_non_json_body(self, mock_gemini_client, request_):
        mock_gemini_client["generate"].return_value = "Sure! Here is your summary..."
        outcome = await analyze(request_)
        assert isinstance(outcome, AnalysisFailure)

    @pytest.mark.asyncio
    async def test_empty_body(self, mock_gemini_client, request_):
        mock_gemini_client["generate"].return_value = ""
        outcome = await analyze(request_)
        assert isinstance(outcome, AnalysisFailure)

    @pytest.mark.asyncio
    async def test_missing_field_is_failure_not_partial(self, mock_gemini_client, analysis_payload, request_):
        del analysis_payload["encouragement"]
        mock_gemini_client["generate"].return_value = json.dumps(analysis_payload)

        outcome = await analyze(request_)

        assert isinstance(outcome, AnalysisFailure)
        assert outcome.error.message == ANALYSIS_FAILED_MESSAGE

    @pytest.mark.asyncio
    async def test_answer_outside_options_is_failure(self, mock_gemini_client, analysis_factory, request_):
        mock_gemini_client["generate"].return_value = json.dumps(analysis_factory(answer="E"))
        outcome = await analyze(request_)
        assert isinstance(outcome, AnalysisFailure)

    @pytest.mark.asyncio
    async def test_failure_logged_with_category(self, mock_gemini_client, request_, caplog):
        mock_gemini_client["generate"].return_value = "{}"
        with caplog.at_level("WARNING", logger="study_buddy_mcp.analysis"):
            await analyze(request_)
        assert "SCHEMA_VALIDATION_FAILED" in caplog.text
