"""Session models — the phase enum and the observable snapshot returned by tools."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from .quiz import QuestionState, QuizScore


class SessionPhase(str, Enum):
    """Top-level phase of one study session."""

    AWAITING_INPUT = "awaiting_input"
    ANALYZING = "analyzing"
    SHOWING_RESULT = "showing_result"
    SHOWING_ERROR = "showing_error"


class SessionSnapshot(BaseModel):
    """Output schema for every study_* tool.

    Built locally from session state — not a Gemini structured output.
    ``result`` uses the camelCase wire names of the analysis contract.
    """

    session_id: str
    phase: SessionPhase
    mode: str
    pending: dict | None = None
    can_submit: bool = False
    result: dict | None = None
    progress: list[QuestionState] = Field(default_factory=list)
    score: QuizScore | None = None
    error: str | None = None
