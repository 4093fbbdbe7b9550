"""Shared type aliases for tool parameters."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field

# ── Literal enums ────────────────────────────────────────────────────────────

InputMode = Literal["image", "text"]
ThinkingLevel = Literal["minimal", "low", "medium", "high"]
ModelPreset = Literal["quality", "fast"]

# ── Annotated aliases ────────────────────────────────────────────────────────

SessionId = Annotated[str, Field(min_length=1, description="Session ID from study_start_session")]
QuestionIndex = Annotated[int, Field(ge=0, description="0-based question index in the quiz")]
OptionLetter = Annotated[str, Field(
    min_length=1,
    max_length=1,
    description="Option letter by position: A for the first option, B for the second, ...",
)]
