"""Study session controller and the in-memory session registry."""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime, timedelta

from .analysis import AnalysisSuccess, analyze
from .capture import InputCapture
from .config import get_config
from .errors import ANALYSIS_FAILED_MESSAGE, InvalidInputError
from .models.content import ImageContent
from .models.quiz import QuestionState
from .models.session import SessionPhase, SessionSnapshot
from .request_builder import build_request
from .results import ResultModel
from .types import InputMode

logger = logging.getLogger(__name__)


class StudySession:
    """One user's study session: input, analysis, result and quiz.

    At most one analysis runs at a time. Each submit takes an attempt
    token; a response is applied only while the session is still analyzing
    that same attempt, so a reset mid-flight discards it.
    """

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        self.capture = InputCapture()
        self.results = ResultModel()
        self.phase = SessionPhase.AWAITING_INPUT
        self.error: str | None = None
        self.created_at = datetime.now()
        self.last_active = datetime.now()
        self._attempt = 0

    def _touch(self) -> None:
        self.last_active = datetime.now()

    def _require(self, *phases: SessionPhase, action: str) -> None:
        if self.phase not in phases:
            allowed = " or ".join(p.value for p in phases)
            raise InvalidInputError(
                f"Cannot {action} while {self.phase.value}; session must be {allowed} (reset first)"
            )

    # ── Input ────────────────────────────────────────────────────────────

    def select_mode(self, mode: InputMode) -> None:
        self._require(SessionPhase.AWAITING_INPUT, action="switch input mode")
        self.capture.switch_mode(mode)
        self._touch()

    def provide_image(self, data: bytes, mime_type: str) -> None:
        """Replace the image slot. Raises InvalidInputError outside awaiting_input."""
        self._require(SessionPhase.AWAITING_INPUT, action="provide an image")
        self.capture.set_image(data, mime_type)
        self._touch()

    def provide_image_content(self, image: ImageContent) -> None:
        self.provide_image(image.data, image.mime_type)

    def provide_text(self, text: str) -> None:
        self._require(SessionPhase.AWAITING_INPUT, action="provide notes")
        self.capture.set_text(text)
        self._touch()

    def can_submit(self) -> bool:
        return (
            self.phase in (SessionPhase.AWAITING_INPUT, SessionPhase.SHOWING_ERROR)
            and self.capture.has_submittable_input()
        )

    # ── Analysis ─────────────────────────────────────────────────────────

    async def submit(self) -> bool:
        """Analyze the active input. Returns False (no state change) if not allowed.

        Allowed from awaiting_input, and from showing_error as an explicit
        resubmission of the preserved input.
        """
        if not self.can_submit():
            logger.debug(
                "Submit ignored for session %s (phase=%s, ready=%s)",
                self.session_id, self.phase.value, self.capture.has_submittable_input(),
            )
            return False

        request = build_request(self.capture.pending)
        self._attempt += 1
        attempt = self._attempt
        self.phase = SessionPhase.ANALYZING
        self.error = None
        self.results.clear()
        self._touch()
        logger.info("Session %s analyzing (attempt %d, mode=%s)", self.session_id, attempt, self.capture.mode)

        try:
            outcome = await analyze(request)
        except asyncio.CancelledError:
            if self.phase is SessionPhase.ANALYZING and self._attempt == attempt:
                self.error = ANALYSIS_FAILED_MESSAGE
                self.phase = SessionPhase.SHOWING_ERROR
                logger.warning("Analysis cancelled for session %s (attempt %d)", self.session_id, attempt)
            raise

        if self.phase is not SessionPhase.ANALYZING or self._attempt != attempt:
            logger.warning("Discarding stale analysis response for session %s (attempt %d)", self.session_id, attempt)
            return True

        if isinstance(outcome, AnalysisSuccess):
            self.results.set(outcome.result)
            self.phase = SessionPhase.SHOWING_RESULT
        else:
            self.error = outcome.error.message
            self.phase = SessionPhase.SHOWING_ERROR
        self._touch()
        logger.info("Session %s → %s", self.session_id, self.phase.value)
        return True

    # ── Quiz ─────────────────────────────────────────────────────────────

    def select_option(self, index: int, letter: str) -> QuestionState:
        self._require(SessionPhase.SHOWING_RESULT, action="answer a question")
        self._touch()
        return self.results.progress.select(index, letter)

    def reveal_answer(self, index: int) -> QuestionState:
        self._require(SessionPhase.SHOWING_RESULT, action="check an answer")
        self._touch()
        return self.results.progress.reveal(index)

    # ── Lifecycle ────────────────────────────────────────────────────────

    def reset(self) -> None:
        """Return to awaiting_input with input, result, progress and error cleared.

        Accepted in every phase; an in-flight analysis keeps running but its
        response is discarded.
        """
        if self.phase is SessionPhase.ANALYZING:
            logger.info("Session %s reset mid-analysis; response will be discarded", self.session_id)
        self.capture.clear()
        self.results.clear()
        self.error = None
        self.phase = SessionPhase.AWAITING_INPUT
        self._attempt += 1
        self._touch()

    def snapshot(self) -> SessionSnapshot:
        """Observable state for the UI collaborator."""
        pending = self.capture.pending
        progress = self.results.progress
        result = self.results.result
        return SessionSnapshot(
            session_id=self.session_id,
            phase=self.phase,
            mode=self.capture.mode,
            pending=pending.preview() if pending is not None else None,
            can_submit=self.can_submit(),
            result=result.model_dump(by_alias=True) if result is not None else None,
            progress=progress.states() if progress is not None else [],
            score=progress.score() if progress is not None else None,
            error=self.error,
        )


class SessionStore:
    """Process-wide session registry with TTL eviction."""

    def __init__(self) -> None:
        self._sessions: dict[str, StudySession] = {}

    def create(self) -> StudySession:
        """Create a new session, evicting expired ones first."""
        self._evict_expired()
        cfg = get_config()
        if len(self._sessions) >= cfg.max_sessions:
            oldest_id = min(self._sessions, key=lambda k: self._sessions[k].last_active)
            del self._sessions[oldest_id]
            logger.info("Evicted least recently active session %s", oldest_id)

        sid = uuid.uuid4().hex[:12]
        session = StudySession(sid)
        self._sessions[sid] = session
        logger.info("Created study session %s", sid)
        return session

    def get(self, session_id: str) -> StudySession | None:
        self._evict_expired()
        return self._sessions.get(session_id)

    def _evict_expired(self) -> int:
        """Remove sessions idle longer than the configured timeout. Returns count evicted."""
        timeout = timedelta(hours=get_config().session_timeout_hours)
        now = datetime.now()
        expired = [sid for sid, s in self._sessions.items() if now - s.last_active > timeout]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info("Evicted %d expired session(s)", len(expired))
        return len(expired)

    @property
    def count(self) -> int:
        """Number of active sessions."""
        return len(self._sessions)


# Module-level singleton
session_store = SessionStore()
