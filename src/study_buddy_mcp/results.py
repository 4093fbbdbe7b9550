"""Result model — the session's single validated analysis and its quiz progress."""

from __future__ import annotations

from .models.study import StudyAnalysis
from .quiz import QuizProgress


class ResultModel:
    """Holds at most one ``StudyAnalysis``; replaced wholesale, never patched."""

    def __init__(self) -> None:
        self._result: StudyAnalysis | None = None
        self._progress: QuizProgress | None = None

    @property
    def result(self) -> StudyAnalysis | None:
        return self._result

    @property
    def progress(self) -> QuizProgress | None:
        return self._progress

    def set(self, result: StudyAnalysis) -> None:
        """Store *result* and start its quiz from scratch."""
        self._result = result
        self._progress = QuizProgress(result.questions)

    def clear(self) -> None:
        self._result = None
        self._progress = None
