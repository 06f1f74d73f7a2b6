from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Question(BaseModel):
    """Single multiple-choice item with a zero-based answer key."""

    model_config = ConfigDict(frozen=True)

    question: str
    options: Tuple[str, ...]
    correct_index: int

    def __init__(
        self,
        question: Optional[str] = None,
        options: Optional[Sequence[str]] = None,
        correct_index: Optional[int] = None,
        **data: Any,
    ) -> None:
        if question is not None:
            data["question"] = question
        if options is not None:
            data["options"] = options
        if correct_index is not None:
            data["correct_index"] = correct_index
        super().__init__(**data)

    @field_validator("options")
    @classmethod
    def validate_options(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if len(value) < 2:
            raise ValueError("a question needs at least two options")
        return value

    @model_validator(mode="after")
    def validate_correct_index(self) -> "Question":
        if not 0 <= self.correct_index < len(self.options):
            raise ValueError(
                f"correct_index {self.correct_index} is outside 0..{len(self.options) - 1}"
            )
        return self


class Quiz(BaseModel):
    """Titled, ordered collection of questions. Order is presentation order."""

    model_config = ConfigDict(frozen=True)

    title: str
    questions: Tuple[Question, ...] = ()

    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def is_playable(self) -> bool:
        return bool(self.questions)


class Screen(str, Enum):
    """Logical phase of a session; rendering is up to the presentation layer."""

    MENU = "menu"
    LOADING = "loading"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ERROR = "error"


class AnswerRecord(BaseModel):
    """Answer given for one question, appended when the session advances past it."""

    model_config = ConfigDict(frozen=True)

    question_index: int
    chosen_index: Optional[int] = None
    is_correct: bool = False


class SessionState(BaseModel):
    """
    Snapshot of a quiz session.

    The engine never mutates a snapshot; every transition builds a new one, so a
    reference handed to a caller stays consistent. A freshly constructed state is
    the menu screen with nothing loaded.
    """

    model_config = ConfigDict(frozen=True)

    screen: Screen = Screen.MENU
    quiz: Optional[Quiz] = None
    current_index: int = Field(default=0, ge=0)
    selected_answer: Optional[int] = None
    score: int = Field(default=0, ge=0)
    error_message: str = ""
    answers: Tuple[AnswerRecord, ...] = ()

    @property
    def current_question(self) -> Optional[Question]:
        if self.quiz is None or self.screen is not Screen.IN_PROGRESS:
            return None
        return self.quiz.questions[self.current_index]

    @property
    def total_questions(self) -> int:
        return self.quiz.total if self.quiz is not None else 0

    @property
    def is_last_question(self) -> bool:
        return self.quiz is not None and self.current_index == self.quiz.total - 1

    @property
    def can_advance(self) -> bool:
        return self.screen is Screen.IN_PROGRESS and self.selected_answer is not None
