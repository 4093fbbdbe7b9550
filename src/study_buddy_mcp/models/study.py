"""Study-guide models — the structured output contract for Gemini.

``StudyAnalysis`` is both the JSON schema sent with every analysis request
and the validator applied to the response. Wire names are camelCase
(``keyTerms``) to match the schema Gemini is asked to fill.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

MAX_OPTIONS = 26


def option_letter(position: int) -> str:
    """Return the letter for the option at *position* (0 → "A")."""
    if not 0 <= position < MAX_OPTIONS:
        raise ValueError(f"Option position {position} outside A..Z")
    return chr(ord("A") + position)


class KeyTerm(BaseModel):
    """A glossary entry extracted from the notes."""

    model_config = ConfigDict(frozen=True)

    term: str
    definition: str


class QuizQuestion(BaseModel):
    """A multiple-choice question whose answer is an option letter."""

    model_config = ConfigDict(frozen=True)

    question: str
    options: list[str] = Field(min_length=1, max_length=MAX_OPTIONS)
    answer: str = Field(description="The correct option letter (e.g., 'A')")

    @property
    def letters(self) -> list[str]:
        """Option letters in display order."""
        return [option_letter(i) for i in range(len(self.options))]

    @model_validator(mode="after")
    def _answer_is_an_option_letter(self) -> QuizQuestion:
        if self.answer not in self.letters:
            raise ValueError(
                f"answer {self.answer!r} is not one of the option letters {self.letters}"
            )
        return self


class StudyAnalysis(BaseModel):
    """Validated study guide: summary, glossary, quiz and a closing note.

    All four fields are required; a response that omits any of them is a
    failed analysis, never a partial one.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    summary: str = Field(description="A 2-sentence summary of the content.")
    key_terms: list[KeyTerm] = Field(alias="keyTerms")
    questions: list[QuizQuestion]
    encouragement: str = Field(description="A supportive closing sentence.")

    @classmethod
    def response_schema(cls) -> dict:
        """JSON schema handed to Gemini as ``response_json_schema``."""
        return cls.model_json_schema(by_alias=True)
