from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from quiz_engine.models import Quiz


class LoadErrorKind(str, Enum):
    SOURCE_UNAVAILABLE = "source_unavailable"
    MALFORMED_CONTENT = "malformed_content"
    EMPTY_QUIZ = "empty_quiz"


class LoadError(Exception):
    """Raised by a loader when it cannot produce a complete, valid quiz."""

    kind: LoadErrorKind = LoadErrorKind.MALFORMED_CONTENT

    def __init__(self, message: str, *, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class SourceUnavailable(LoadError):
    """The underlying bytes could not be obtained (missing asset, network failure)."""

    kind = LoadErrorKind.SOURCE_UNAVAILABLE


class MalformedContent(LoadError):
    """Bytes were obtained but do not describe a valid quiz."""

    kind = LoadErrorKind.MALFORMED_CONTENT


class EmptyQuiz(LoadError):
    """The document is well-formed but contains no questions."""

    kind = LoadErrorKind.EMPTY_QUIZ


class ContentLoader(ABC):
    """Strategy producing a normalized quiz from some external source."""

    label: str = "quiz"

    @abstractmethod
    async def load(self) -> Quiz:
        """Return a quiz with at least one question or raise a `LoadError`."""
        raise NotImplementedError
