"""
In-memory session orchestration.

``SessionService`` drives each session through the phase reducer and runs the
three asynchronous operation families against the content service:
exercise generation, topic suggestion, and reference translation. Everything
runs on the event loop; sessions are mutated only here and no locks are
needed. Late responses are matched against ``attempt_id`` or
``exercise_token`` and dropped when superseded.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from collections import OrderedDict
from collections.abc import Callable

from lexical_gap.core.config import (
    DEFAULT_MAX_SESSIONS,
    DEFAULT_SESSION_TTL_SECONDS,
    DEFAULT_SHARE_COMPOSE_URL,
)
from lexical_gap.core.errors import (
    GENERIC_GENERATION_MESSAGE,
    ApplicationError,
    ConfigurationError,
    ConflictError,
    ErrorCode,
    GenerationFailed,
    IncompleteAnswersError,
    NotFoundError,
    OperationInProgressError,
    TopicSuggestionFailed,
)
from lexical_gap.core.logging import session_log_context
from lexical_gap.models.catalog import DEFAULT_TEMPERATURE, get_language
from lexical_gap.models.exercise import Exercise
from lexical_gap.models.session import (
    GenerationRequest,
    ReferenceStatus,
    Session,
    SessionEvent,
    SessionPhase,
)
from lexical_gap.services.content import ContentRequestService
from lexical_gap.services.placeholders import clean_text
from lexical_gap.services.scoring import (
    DEFAULT_PREVIEW_MAX_CHARS,
    ShareReport,
    build_share_report,
    missing_blank_ids,
)
from lexical_gap.services.state_machine import transition

logger = logging.getLogger("lexical_gap.services.session")


class SessionService:
    """Owns every live session and the background translation tasks."""

    def __init__(
        self,
        content: ContentRequestService | None,
        *,
        pivot_language: str = "English",
        secondary_language: str = "Spanish",
        share_preview_max_chars: int = DEFAULT_PREVIEW_MAX_CHARS,
        share_compose_url: str = DEFAULT_SHARE_COMPOSE_URL,
        session_ttl_seconds: float = DEFAULT_SESSION_TTL_SECONDS,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._content = content
        self.pivot_language = pivot_language
        self.secondary_language = secondary_language
        self.share_preview_max_chars = share_preview_max_chars
        self.share_compose_url = share_compose_url
        self.session_ttl_seconds = session_ttl_seconds
        self.max_sessions = max_sessions
        self._clock = clock
        # Ordered from least to most recently touched.
        self._sessions: OrderedDict[uuid.UUID, Session] = OrderedDict()
        self._background_tasks: set[asyncio.Task[None]] = set()

    @property
    def generation_enabled(self) -> bool:
        return self._content is not None

    @property
    def session_count(self) -> int:
        return len(self._sessions)

    def create_session(self) -> Session:
        self._evict_idle()
        while len(self._sessions) >= self.max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.info(
                "Session evicted",
                extra={"evicted_session_id": str(evicted_id), "reason": "capacity"},
            )

        session = Session(touched_at=self._clock())
        self._sessions[session.id] = session
        with session_log_context(session.id):
            logger.info("Session created")
        return session

    def get_session(self, session_id: uuid.UUID) -> Session:
        """Return a live session and mark it as recently used."""
        self._evict_idle()
        session = self._sessions.get(session_id)
        if session is None:
            raise NotFoundError(
                ErrorCode.SESSION_NOT_FOUND,
                "Session not found.",
                details={"session_id": str(session_id)},
            )
        session.touched_at = self._clock()
        self._sessions.move_to_end(session_id)
        return session

    def delete_session(self, session_id: uuid.UUID) -> None:
        """Forget a session. Outstanding background work finishes against the orphan."""
        self.get_session(session_id)
        del self._sessions[session_id]
        with session_log_context(session_id):
            logger.info("Session deleted")

    def default_reference_language(self, learning_language: str) -> str:
        """Pivot language, unless the learner studies the pivot language itself."""
        if learning_language == self.pivot_language:
            return self.secondary_language
        return self.pivot_language

    async def start(self, session_id: uuid.UUID, request: GenerationRequest) -> Session:
        """
        Generate a new exercise for ``request``.

        The session is Loading while the model works and ends up Playing or
        Errored. A ``new_game`` issued meanwhile wins: the late result is
        dropped and the session stays where the learner left it.
        """
        session = self.get_session(session_id)
        with session_log_context(session.id):
            content = self._require_content()
            _require_supported_language(request.language)

            session.phase = transition(session.phase, SessionEvent.START)
            attempt_id = uuid.uuid4()
            session.attempt_id = attempt_id
            session.request = request
            session.error_message = None
            session.is_generating = True
            session.clear_exercise()

            log_extra = {
                "operation": "generate_exercise",
                "language": request.language,
                "level": request.level.value,
                "topic": request.topic,
                "attempt_id": str(attempt_id),
            }
            logger.info("Exercise generation started", extra=log_extra)

            try:
                exercise = await content.generate_exercise(
                    request.topic,
                    request.level,
                    request.language,
                    request.temperature,
                )
            except GenerationFailed as e:
                if self._is_current_attempt(session, attempt_id):
                    self._fail_generation(session)
                logger.warning(
                    "Exercise generation failed",
                    extra={**log_extra, "error_code": e.code, "error": str(e)},
                )
                return session
            except Exception:
                if self._is_current_attempt(session, attempt_id):
                    self._fail_generation(session)
                raise

            if not self._is_current_attempt(session, attempt_id):
                logger.info("Discarding superseded exercise", extra=log_extra)
                return session

            session.phase = transition(session.phase, SessionEvent.SUCCEED)
            session.is_generating = False
            session.exercise = exercise
            session.answers = {}
            session.exercise_token = uuid.uuid4()
            self._resolve_reference(
                session, self.default_reference_language(request.language)
            )
            logger.info(
                "Exercise ready",
                extra={**log_extra, "reference_language": session.reference_language},
            )
            return session

    def retry(self, session_id: uuid.UUID) -> Session:
        session = self.get_session(session_id)
        session.phase = transition(session.phase, SessionEvent.RETRY)
        session.error_message = None
        session.attempt_id = None
        return session

    def select_answer(self, session_id: uuid.UUID, blank_id: int, value: str) -> Session:
        session = self.get_session(session_id)
        if session.phase is not SessionPhase.PLAYING or session.exercise is None:
            raise ConflictError(
                ErrorCode.CONFLICT,
                "Answers can only be changed while the exercise is in play.",
                details={"phase": session.phase.value},
            )

        blank = session.exercise.get_blank(blank_id)
        if blank is None:
            raise NotFoundError(
                ErrorCode.UNKNOWN_BLANK,
                f"Blank {blank_id} does not exist in this exercise.",
                details={"blank_id": blank_id},
            )
        if value not in blank.options:
            raise ApplicationError(
                ErrorCode.INVALID_OPTION,
                "The selected value is not one of the options for this blank.",
                details={"blank_id": blank_id, "value": value},
            )

        session.answers[blank_id] = value
        return session

    def submit(self, session_id: uuid.UUID) -> Session:
        session = self.get_session(session_id)
        next_phase = transition(session.phase, SessionEvent.SUBMIT)
        exercise = self._require_exercise(session)

        missing = missing_blank_ids(exercise, session.answers)
        if missing:
            raise IncompleteAnswersError(missing)

        session.phase = next_phase
        with session_log_context(session.id):
            logger.info(
                "Answers submitted",
                extra={"answered": len(session.answers), "blanks": len(exercise.blanks)},
            )
        return session

    def restart(self, session_id: uuid.UUID) -> Session:
        session = self.get_session(session_id)
        session.phase = transition(session.phase, SessionEvent.RESTART)
        session.clear_exercise()
        return session

    def new_game(self, session_id: uuid.UUID) -> Session:
        session = self.get_session(session_id)
        session.phase = transition(session.phase, SessionEvent.NEW_GAME)
        session.clear_exercise()
        session.attempt_id = None
        session.is_generating = False
        session.error_message = None
        return session

    async def change_reference_language(self, session_id: uuid.UUID, language: str) -> Session:
        """
        Point the reference panel at ``language``.

        The pivot language is served from the exercise's cached translation;
        any other language triggers a fresh background translation.
        """
        session = self.get_session(session_id)
        with session_log_context(session.id):
            _require_supported_language(language)
            if session.phase not in (SessionPhase.PLAYING, SessionPhase.RESULTS):
                raise ConflictError(
                    ErrorCode.NO_EXERCISE,
                    "There is no exercise to translate.",
                    details={"phase": session.phase.value},
                )
            self._require_exercise(session)
            if session.is_translating:
                raise OperationInProgressError("translation")

            self._resolve_reference(session, language)
            return session

    async def suggest_topics(
        self,
        session_id: uuid.UUID,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> Session:
        """Replace the suggested topics; an empty or failed reply keeps the old ones."""
        session = self.get_session(session_id)
        with session_log_context(session.id):
            content = self._require_content()
            if session.is_suggesting_topics:
                raise OperationInProgressError("topic suggestion")

            session.is_suggesting_topics = True
            try:
                topics = await content.suggest_topics(temperature)
            except TopicSuggestionFailed as e:
                logger.warning(
                    "Topic suggestion unavailable",
                    extra={"operation": "suggest_topics", "error": str(e.__cause__ or e)},
                )
                topics = []
            finally:
                session.is_suggesting_topics = False

            if topics:
                session.suggested_topics = topics
            return session

    def share(self, session_id: uuid.UUID) -> ShareReport:
        session = self.get_session(session_id)
        if session.phase is not SessionPhase.RESULTS:
            raise ConflictError(
                ErrorCode.CONFLICT,
                "Results can be shared only after the answers are checked.",
                details={"phase": session.phase.value},
            )
        exercise = self._require_exercise(session)
        request = session.request or GenerationRequest(language=self.pivot_language)
        return build_share_report(
            exercise,
            session.answers,
            topic=request.topic,
            level=request.level,
            language=request.language,
            max_chars=self.share_preview_max_chars,
            compose_url=self.share_compose_url,
        )

    async def drain(self) -> None:
        """Wait for every outstanding background translation."""
        while self._background_tasks:
            await asyncio.gather(*list(self._background_tasks))

    def _evict_idle(self) -> None:
        deadline = self._clock() - self.session_ttl_seconds
        while self._sessions:
            oldest_id, oldest = next(iter(self._sessions.items()))
            if oldest.touched_at > deadline:
                break
            del self._sessions[oldest_id]
            logger.info(
                "Session evicted",
                extra={"evicted_session_id": str(oldest_id), "reason": "idle"},
            )

    def _require_content(self) -> ContentRequestService:
        if self._content is None:
            raise ConfigurationError()
        return self._content

    @staticmethod
    def _require_exercise(session: Session) -> Exercise:
        if session.exercise is None:
            raise ConflictError(ErrorCode.NO_EXERCISE, "The session has no exercise.")
        return session.exercise

    @staticmethod
    def _is_current_attempt(session: Session, attempt_id: uuid.UUID) -> bool:
        return session.phase is SessionPhase.LOADING and session.attempt_id == attempt_id

    @staticmethod
    def _fail_generation(session: Session) -> None:
        session.phase = transition(session.phase, SessionEvent.FAIL)
        session.is_generating = False
        session.error_message = GENERIC_GENERATION_MESSAGE

    def _resolve_reference(self, session: Session, language: str) -> None:
        exercise = self._require_exercise(session)
        session.reference_language = language

        if language == self.pivot_language:
            session.reference_text = exercise.reference_translation
            session.reference_status = ReferenceStatus.IDLE
            return

        content = self._require_content()
        session.reference_status = ReferenceStatus.TRANSLATING
        task = asyncio.create_task(
            self._translate_in_background(
                session,
                content,
                clean_text(exercise),
                language,
                session.exercise_token,
            )
        )
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    async def _translate_in_background(
        self,
        session: Session,
        content: ContentRequestService,
        text: str,
        language: str,
        exercise_token: uuid.UUID | None,
    ) -> None:
        log_extra = {"operation": "translate", "target_language": language}
        try:
            translated = await content.translate(text, language)
        except Exception:
            logger.exception("Reference translation crashed", extra=log_extra)
            translated = ""

        if session.exercise_token != exercise_token or session.reference_language != language:
            logger.info("Discarding stale translation", extra=log_extra)
            return

        if translated:
            session.reference_text = translated
        else:
            logger.info("Keeping previous reference text", extra=log_extra)
        session.reference_status = ReferenceStatus.IDLE


def _require_supported_language(language: str) -> None:
    if get_language(language) is None:
        raise ApplicationError(
            ErrorCode.UNSUPPORTED_LANGUAGE,
            f"Unsupported language: {language}.",
            status_code=422,
            details={"language": language},
        )


__all__ = ["SessionService"]
