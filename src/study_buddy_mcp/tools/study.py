"""Study tools — session commands on a FastMCP sub-server.

Every tool returns the session snapshot after the command, or a ToolError
dict when the command was rejected (rejected commands change nothing).
"""

from __future__ import annotations

from typing import Annotated

from fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from ..capture import decode_data_url, read_image_file
from ..errors import InvalidInputError, make_tool_error
from ..session import StudySession, session_store
from ..tracing import trace
from ..types import InputMode, OptionLetter, QuestionIndex, SessionId

study_server = FastMCP("study")


def _session(session_id: str) -> StudySession:
    session = session_store.get(session_id)
    if session is None:
        raise InvalidInputError(f"Unknown or expired session '{session_id}' — call study_start_session")
    return session


def _snapshot(session: StudySession) -> dict:
    return session.snapshot().model_dump(mode="json")


@study_server.tool(annotations=ToolAnnotations(readOnlyHint=False, openWorldHint=False))
@trace(name="study_start_session", span_type="TOOL")
async def study_start_session() -> dict:
    """Start a new study session awaiting an image or typed notes.

    Returns:
        Session snapshot including the new session_id.
    """
    return _snapshot(session_store.create())


@study_server.tool(annotations=ToolAnnotations(readOnlyHint=False, idempotentHint=True, openWorldHint=False))
@trace(name="study_select_mode", span_type="TOOL")
async def study_select_mode(session_id: SessionId, mode: InputMode) -> dict:
    """Choose which input is submitted: "image" (photo of notes) or "text" (typed notes).

    Only allowed while awaiting input. The other input is kept, not deleted.
    """
    try:
        session = _session(session_id)
        session.select_mode(mode)
        return _snapshot(session)
    except InvalidInputError as exc:
        return make_tool_error(exc)


@study_server.tool(annotations=ToolAnnotations(readOnlyHint=False, idempotentHint=True, openWorldHint=False))
@trace(name="study_provide_image", span_type="TOOL")
async def study_provide_image(
    session_id: SessionId,
    file_path: Annotated[str | None, Field(
        description="Local image file of notes or textbook pages (png, jpeg, webp, heic, ...)",
    )] = None,
    data_url: Annotated[str | None, Field(
        description="Image as a data URL: data:<mime>;base64,<payload>",
    )] = None,
) -> dict:
    """Provide a photo of notes or textbook pages, replacing any previous image.

    Provide exactly one of file_path or data_url. Only allowed while
    awaiting input.
    """
    file_path = file_path or None
    data_url = data_url or None
    try:
        session = _session(session_id)
        if (file_path is None) == (data_url is None):
            raise InvalidInputError("Provide exactly one of: file_path or data_url")
        image = read_image_file(file_path) if file_path else decode_data_url(data_url)
        session.provide_image_content(image)
        return _snapshot(session)
    except (FileNotFoundError, InvalidInputError) as exc:
        return make_tool_error(exc)


@study_server.tool(annotations=ToolAnnotations(readOnlyHint=False, idempotentHint=True, openWorldHint=False))
@trace(name="study_provide_text", span_type="TOOL")
async def study_provide_text(
    session_id: SessionId,
    text: Annotated[str, Field(description="Study notes; must be longer than 10 characters to submit")],
) -> dict:
    """Provide typed or pasted study notes, replacing the previous text."""
    try:
        session = _session(session_id)
        session.provide_text(text)
        return _snapshot(session)
    except InvalidInputError as exc:
        return make_tool_error(exc)


@study_server.tool(annotations=ToolAnnotations(readOnlyHint=False, openWorldHint=True))
@trace(name="study_submit", span_type="TOOL")
async def study_submit(session_id: SessionId) -> dict:
    """Analyze the active input with Gemini: summary, key terms and a quiz.

    Ignored (snapshot unchanged) when the input is not ready or an analysis
    is already running. On failure the session shows a generic error and
    keeps the input, so submitting again retries it.

    Returns:
        Session snapshot; phase is "showing_result" or "showing_error".
    """
    try:
        session = _session(session_id)
    except InvalidInputError as exc:
        return make_tool_error(exc)
    await session.submit()
    return _snapshot(session)


@study_server.tool(annotations=ToolAnnotations(readOnlyHint=False, openWorldHint=False))
@trace(name="study_select_option", span_type="TOOL")
async def study_select_option(
    session_id: SessionId,
    question_index: QuestionIndex,
    letter: OptionLetter,
) -> dict:
    """Select an answer letter for a question. Ignored once that question is revealed."""
    try:
        session = _session(session_id)
        session.select_option(question_index, letter)
        return _snapshot(session)
    except InvalidInputError as exc:
        return make_tool_error(exc)


@study_server.tool(annotations=ToolAnnotations(readOnlyHint=False, idempotentHint=True, openWorldHint=False))
@trace(name="study_reveal_answer", span_type="TOOL")
async def study_reveal_answer(session_id: SessionId, question_index: QuestionIndex) -> dict:
    """Check the selected answer for a question; the selection is locked afterwards."""
    try:
        session = _session(session_id)
        session.reveal_answer(question_index)
        return _snapshot(session)
    except InvalidInputError as exc:
        return make_tool_error(exc)


@study_server.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True, idempotentHint=True, openWorldHint=False))
@trace(name="study_reset", span_type="TOOL")
async def study_reset(session_id: SessionId) -> dict:
    """Start over: clear input, result, quiz progress and error."""
    try:
        session = _session(session_id)
    except InvalidInputError as exc:
        return make_tool_error(exc)
    session.reset()
    return _snapshot(session)


@study_server.tool(annotations=ToolAnnotations(readOnlyHint=True, openWorldHint=False))
@trace(name="study_get_state", span_type="TOOL")
async def study_get_state(session_id: SessionId) -> dict:
    """Return the current session snapshot without changing anything."""
    try:
        return _snapshot(_session(session_id))
    except InvalidInputError as exc:
        return make_tool_error(exc)
