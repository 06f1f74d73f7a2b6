from __future__ import annotations

import asyncio
import logging
import xml.sax
from importlib import resources
from pathlib import Path
from typing import Callable, List, Optional

from pydantic import ValidationError

from quiz_engine.loaders.base import ContentLoader, EmptyQuiz, MalformedContent, SourceUnavailable
from quiz_engine.models import Question, Quiz

logger = logging.getLogger(__name__)

TextReader = Callable[[str], str]

ROOT_TAG = "quiz"
QUESTION_TAG = "question"
TEXT_TAG = "text"
OPTION_TAG = "option"
CORRECT_ANSWER_TAG = "correct_answer"


def package_asset_reader() -> TextReader:
    """Return a reader for quiz documents bundled in `quiz_engine.assets`."""

    def read(name: str) -> str:
        return resources.files("quiz_engine.assets").joinpath(name).read_text(encoding="utf-8")

    return read


def directory_reader(base_dir: Path) -> TextReader:
    """Return a reader resolving asset names against a directory on disk."""

    def read(name: str) -> str:
        return (Path(base_dir) / name).read_text(encoding="utf-8")

    return read


class _QuizHandler(xml.sax.ContentHandler):
    """
    Event handler that assembles questions while the document streams past.

    Character data is buffered and routed on the next tag boundary to the field
    named by the most recently opened tag. Text under tags it does not know is
    dropped.
    """

    def __init__(self, fallback_title: str):
        super().__init__()
        self.title: Optional[str] = None
        self.fallback_title = fallback_title
        self.questions: List[Question] = []
        self.current_tag = ""
        self._buffer: List[str] = []
        self._reset_question()

    def _reset_question(self) -> None:
        self.question_text = ""
        self.options: List[str] = []
        self.correct_index = 0

    def _flush_text(self) -> None:
        text = "".join(self._buffer).strip()
        self._buffer = []
        if not text:
            return
        if self.current_tag == TEXT_TAG:
            self.question_text = text
        elif self.current_tag == OPTION_TAG:
            self.options.append(text)
        elif self.current_tag == CORRECT_ANSWER_TAG:
            try:
                self.correct_index = int(text)
            except ValueError:
                logger.warning(
                    "Unparsable correct answer %r in question %d; defaulting to 0",
                    text,
                    len(self.questions),
                )
                self.correct_index = 0

    def startElement(self, name, attrs):  # noqa: N802 - SAX API
        self._flush_text()
        if name == ROOT_TAG and self.title is None:
            self.title = attrs.get("title")
        elif name == QUESTION_TAG:
            self._reset_question()
        self.current_tag = name

    def characters(self, content):
        self._buffer.append(content)

    def endElement(self, name):  # noqa: N802 - SAX API
        self._flush_text()
        if name != QUESTION_TAG:
            return
        index = len(self.questions)
        try:
            question = Question(
                question=self.question_text,
                options=list(self.options),
                correct_index=self.correct_index,
            )
        except ValidationError as exc:
            raise MalformedContent(f"question {index} is invalid: {exc}") from exc
        self.questions.append(question)
        self._reset_question()

    def build_quiz(self) -> Quiz:
        return Quiz(title=self.title or self.fallback_title, questions=self.questions)


def parse_markup_quiz(content: str, fallback_title: str = "Quiz") -> Quiz:
    """
    Parse an XML quiz document, raising `MalformedContent` or `EmptyQuiz`.

    `content` is already decoded text, so any `encoding` in the XML declaration is ignored.
    """
    handler = _QuizHandler(fallback_title)
    try:
        xml.sax.parseString(content, handler)
    except xml.sax.SAXParseException as exc:
        raise MalformedContent(f"document is not well-formed: {exc}") from exc
    quiz = handler.build_quiz()
    if not quiz.is_playable:
        raise EmptyQuiz("document contains no questions")
    return quiz


class MarkupQuizLoader(ContentLoader):
    """Load a quiz from a tag-structured document such as `geology1.xml`."""

    label = "XML quiz"

    def __init__(
        self,
        asset_name: str,
        read_text: Optional[TextReader] = None,
        fallback_title: str = "Quiz",
    ):
        self.asset_name = asset_name
        self.read_text = read_text or package_asset_reader()
        self.fallback_title = fallback_title

    async def load(self) -> Quiz:
        try:
            content = await asyncio.to_thread(self.read_text, self.asset_name)
        except OSError as exc:
            raise SourceUnavailable(
                f"cannot read {self.asset_name}: {exc}", cause=exc
            ) from exc
        except UnicodeDecodeError as exc:
            raise MalformedContent(f"{self.asset_name} is not valid UTF-8 text") from exc
        logger.debug("Read %d characters from %s", len(content), self.asset_name)
        quiz = parse_markup_quiz(content, self.fallback_title)
        logger.info("Parsed %d questions from %s", quiz.total, self.asset_name)
        return quiz
