"""Quiz interaction state machine — select, reveal, score."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .errors import InvalidInputError
from .models.quiz import UNANSWERED, QuestionState, QuizScore, Revealed, Selected
from .models.study import QuizQuestion

logger = logging.getLogger(__name__)


class QuizProgress:
    """Sparse per-question progress for one quiz.

    Entries are created lazily on first interaction; an index with no entry
    is ``Unanswered``. A revealed entry is never modified again.
    """

    def __init__(self, questions: Sequence[QuizQuestion]) -> None:
        self._questions = tuple(questions)
        self._states: dict[int, QuestionState] = {}

    def __len__(self) -> int:
        return len(self._states)

    def _question(self, index: int) -> QuizQuestion:
        if not 0 <= index < len(self._questions):
            raise InvalidInputError(
                f"Question index {index} out of range (quiz has {len(self._questions)})"
            )
        return self._questions[index]

    def state(self, index: int) -> QuestionState:
        self._question(index)
        return self._states.get(index, UNANSWERED)

    def states(self) -> list[QuestionState]:
        """State of every question in display order."""
        return [self._states.get(i, UNANSWERED) for i in range(len(self._questions))]

    def select(self, index: int, letter: str) -> QuestionState:
        """Select option *letter*; re-selecting overwrites, revealed questions ignore it."""
        question = self._question(index)
        current = self._states.get(index, UNANSWERED)
        if isinstance(current, Revealed):
            logger.debug("Ignoring select on revealed question %d", index)
            return current
        if letter not in question.letters:
            raise InvalidInputError(
                f"Letter {letter!r} is not an option of question {index} ({', '.join(question.letters)})"
            )
        self._states[index] = Selected(letter=letter)
        return self._states[index]

    def reveal(self, index: int) -> QuestionState:
        """Check the selected letter against the answer; needs a selection first."""
        question = self._question(index)
        current = self._states.get(index, UNANSWERED)
        if not isinstance(current, Selected):
            logger.debug("Nothing to reveal for question %d (%s)", index, current.status)
            return current
        self._states[index] = Revealed(letter=current.letter, correct=current.letter == question.answer)
        return self._states[index]

    def score(self) -> QuizScore:
        revealed = [s for s in self._states.values() if isinstance(s, Revealed)]
        return QuizScore(
            total=len(self._questions),
            revealed=len(revealed),
            correct=sum(1 for s in revealed if s.correct),
        )
