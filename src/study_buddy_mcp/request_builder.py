"""Build Gemini analysis requests from pending content."""

from __future__ import annotations

from dataclasses import dataclass

from google.genai import types

from .capture import MIN_TEXT_CHARS, text_is_submittable
from .errors import InvalidInputError
from .models.content import ImageContent, PendingContent, TextContent
from .models.study import StudyAnalysis
from .prompts.study import IMAGE_ANALYSIS, STUDY_SYSTEM, TEXT_ANALYSIS


@dataclass(frozen=True)
class AnalysisRequest:
    """One immutable analysis attempt: ordered parts plus the output contract."""

    parts: tuple[types.Part, ...]
    schema: type[StudyAnalysis] = StudyAnalysis
    system_instruction: str = STUDY_SYSTEM

    @property
    def response_schema(self) -> dict:
        return self.schema.response_schema()


def build_request(pending: PendingContent | None) -> AnalysisRequest:
    """Convert *pending* content into an ``AnalysisRequest``.

    Image content becomes an inline bytes part followed by the image
    instruction. Text content becomes one part: the text instruction with
    the user's notes appended verbatim.

    Raises:
        InvalidInputError: If there is no content, the image is empty, or the
            trimmed text is MIN_TEXT_CHARS characters or shorter.
    """
    if isinstance(pending, ImageContent):
        if not pending.data:
            raise InvalidInputError("Image is empty")
        return AnalysisRequest(parts=(
            types.Part.from_bytes(data=pending.data, mime_type=pending.mime_type),
            types.Part(text=IMAGE_ANALYSIS),
        ))
    if isinstance(pending, TextContent):
        if not text_is_submittable(pending.text):
            raise InvalidInputError(f"Notes must be longer than {MIN_TEXT_CHARS} characters")
        return AnalysisRequest(parts=(types.Part(text=TEXT_ANALYSIS + pending.text),))
    raise InvalidInputError("Nothing to analyze — provide an image or notes first")
