"""Per-question quiz states.

A question moves ``Unanswered → Selected → Revealed``; ``Revealed`` is
terminal until a new analysis replaces the quiz.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class Unanswered(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["unanswered"] = "unanswered"


class Selected(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["selected"] = "selected"
    letter: str


class Revealed(BaseModel):
    """Answer checked; ``letter`` is frozen from here on."""

    model_config = ConfigDict(frozen=True)

    status: Literal["revealed"] = "revealed"
    letter: str
    correct: bool


QuestionState = Annotated[Union[Unanswered, Selected, Revealed], Field(discriminator="status")]

UNANSWERED = Unanswered()


class QuizScore(BaseModel):
    """Tally of revealed questions."""

    total: int
    revealed: int
    correct: int
