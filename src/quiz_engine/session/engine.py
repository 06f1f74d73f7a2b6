from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Callable, Optional

from quiz_engine.loaders.base import ContentLoader, LoadError, LoadErrorKind
from quiz_engine.models import AnswerRecord, Quiz, Screen, SessionState

logger = logging.getLogger(__name__)


def describe_load_error(label: str, error: BaseException) -> str:
    """Turn a loader failure into the message shown on the error screen."""
    if isinstance(error, LoadError):
        if error.kind is LoadErrorKind.SOURCE_UNAVAILABLE:
            return f"Failed to load {label}: the quiz source could not be reached ({error.message})"
        if error.kind is LoadErrorKind.MALFORMED_CONTENT:
            return f"Failed to load {label}: the quiz content is malformed ({error.message})"
        if error.kind is LoadErrorKind.EMPTY_QUIZ:
            return f"Failed to load {label}: the quiz has no questions"
    return f"Failed to load {label}: {error}"


class QuizSessionEngine:
    """
    State machine driving one quiz session from the menu to the result screen.

    The engine owns a single `SessionState` snapshot and replaces it wholesale on every
    transition while holding an internal lock, so readers only ever observe complete
    states. Loading is the only asynchronous step: `request_load` schedules the loader
    on the running event loop and returns the task. Each request takes a new load token;
    a finished load is applied only if its token is still current and the session is
    still loading, so results from superseded or abandoned loads are dropped.

    Operations called in the wrong phase are logged and ignored rather than raised, so
    a stray button press cannot crash a session. They return ``False`` (or ``None`` for
    `request_load`) to let callers notice.

    Examples
    --------
    Inside a coroutine:

        engine = QuizSessionEngine()
        await engine.request_load(MarkupQuizLoader("geology1.xml"))
        engine.select_answer(0)
        engine.advance()
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state = SessionState()
        self._load_token = 0
        self._load_task: Optional[asyncio.Task] = None

    @property
    def state(self) -> SessionState:
        """Current immutable snapshot of the session."""
        return self._state

    def _transition(self, update: Callable[[SessionState], Optional[SessionState]]) -> bool:
        with self._lock:
            new_state = update(self._state)
            if new_state is None:
                return False
            self._state = new_state
            return True

    # Loading

    def request_load(self, loader: ContentLoader) -> Optional[asyncio.Task]:
        """
        Enter the loading screen and start `loader.load()` in the background.

        Allowed from the menu, or while another load is still pending, in which case the
        pending load is superseded and cancelled. Must be called from inside a running
        event loop; otherwise `RuntimeError` is raised and the state is left untouched.
        """
        loop = asyncio.get_running_loop()
        with self._lock:
            if self._state.screen not in (Screen.MENU, Screen.LOADING):
                logger.warning(
                    "Ignoring load request for %s while on %s screen",
                    loader.label,
                    self._state.screen.value,
                )
                return None
            self._load_token += 1
            token = self._load_token
            self._cancel_pending_load()
            self._state = SessionState(screen=Screen.LOADING)
            task = loop.create_task(self._run_load(loader, token))
            self._load_task = task
        logger.info("Loading %s (request %d)", loader.label, token)
        return task

    async def _run_load(self, loader: ContentLoader, token: int) -> None:
        try:
            quiz = await loader.load()
        except LoadError as exc:
            logger.warning("Loading %s failed (%s): %s", loader.label, exc.kind.value, exc.message)
            self._finish_load(token, error=describe_load_error(loader.label, exc))
        except Exception as exc:  # noqa: BLE001 - loader failures end on the error screen
            logger.exception("Unexpected failure while loading %s", loader.label)
            self._finish_load(token, error=describe_load_error(loader.label, exc))
        else:
            self._finish_load(token, quiz=quiz)

    def _finish_load(
        self,
        token: int,
        *,
        quiz: Optional[Quiz] = None,
        error: Optional[str] = None,
    ) -> None:
        def update(state: SessionState) -> Optional[SessionState]:
            if token != self._load_token or state.screen is not Screen.LOADING:
                return None
            if quiz is not None and quiz.is_playable:
                return SessionState(screen=Screen.IN_PROGRESS, quiz=quiz)
            return SessionState(
                screen=Screen.ERROR,
                error_message=error or "Failed to load quiz: the quiz has no questions",
            )

        if self._transition(update):
            if quiz is not None:
                logger.info("Loaded '%s' with %d questions", quiz.title, quiz.total)
        else:
            logger.info("Discarding result of superseded load request %d", token)

    def _cancel_pending_load(self) -> None:
        task, self._load_task = self._load_task, None
        if task is not None and not task.done():
            task.cancel()

    async def wait_for_load(self) -> SessionState:
        """
        Wait for the most recent load request to settle and return the resulting state.

        The load is shielded, so cancelling the waiter leaves the load running. When the
        awaited load is superseded by a newer request, waiting moves on to the new one.
        """
        while True:
            task = self._load_task
            if task is None:
                return self._state
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                current = asyncio.current_task()
                if not task.cancelled() or (current is not None and current.cancelling()):
                    raise
            if self._load_task is task:
                return self._state

    # Answering

    def select_answer(self, index: int) -> bool:
        """Record `index` as the answer to the current question."""

        def update(state: SessionState) -> Optional[SessionState]:
            question = state.current_question
            if question is None:
                logger.warning("Ignoring answer selection on %s screen", state.screen.value)
                return None
            if isinstance(index, bool) or not isinstance(index, int):
                logger.warning("Rejecting non-integer answer %r", index)
                return None
            if not 0 <= index < len(question.options):
                logger.warning(
                    "Rejecting answer %d for question %d with %d options",
                    index,
                    state.current_index,
                    len(question.options),
                )
                return None
            return state.model_copy(update={"selected_answer": index})

        return self._transition(update)

    def can_advance(self) -> bool:
        return self._state.can_advance

    def advance(self) -> bool:
        """Score the current answer and move to the next question or the result screen."""

        def update(state: SessionState) -> Optional[SessionState]:
            question = state.current_question
            if question is None or state.selected_answer is None:
                return None
            is_correct = state.selected_answer == question.correct_index
            record = AnswerRecord(
                question_index=state.current_index,
                chosen_index=state.selected_answer,
                is_correct=is_correct,
            )
            changes: dict[str, Any] = {
                "score": state.score + (1 if is_correct else 0),
                "answers": state.answers + (record,),
            }
            if state.is_last_question:
                changes["screen"] = Screen.COMPLETED
            else:
                changes["current_index"] = state.current_index + 1
                changes["selected_answer"] = None
            return state.model_copy(update=changes)

        advanced = self._transition(update)
        if advanced and self._state.screen is Screen.COMPLETED:
            logger.info(
                "Quiz completed with score %d/%d",
                self._state.score,
                self._state.total_questions,
            )
        return advanced

    # Navigation

    def restart(self) -> bool:
        """Replay the completed quiz from the first question without reloading it."""

        def update(state: SessionState) -> Optional[SessionState]:
            if state.screen is not Screen.COMPLETED or state.quiz is None:
                logger.warning("Ignoring restart on %s screen", state.screen.value)
                return None
            return SessionState(screen=Screen.IN_PROGRESS, quiz=state.quiz)

        return self._transition(update)

    retry = restart

    def back_to_menu(self) -> None:
        """Discard everything about the current session, including any pending load."""
        with self._lock:
            self._load_token += 1
            self._cancel_pending_load()
            self._state = SessionState()
