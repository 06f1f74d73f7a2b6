from __future__ import annotations

import asyncio
import json
import logging
from importlib import resources
from typing import Awaitable, Callable, List, Optional

import requests
from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError

from quiz_engine.loaders.base import ContentLoader, EmptyQuiz, MalformedContent, SourceUnavailable
from quiz_engine.models import Question, Quiz

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Awaitable[bytes]]

SAMPLE_PAYLOAD_NAME = "science_quiz.json"


class RemoteQuestionPayload(BaseModel):
    """Question entry as served by the quiz endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    question: str
    options: List[str]
    correct_answer: StrictInt = Field(alias="correctAnswer")


class RemoteQuizPayload(BaseModel):
    """Top-level quiz document as served by the quiz endpoint."""

    title: str
    questions: List[RemoteQuestionPayload]


def http_fetcher(timeout: float = 10.0, session: Optional[requests.Session] = None) -> Fetcher:
    """
    Build a fetcher that downloads bytes over HTTP.

    The blocking `requests` call runs in a worker thread so the event loop keeps
    serving the session while the download is pending. HTTP error statuses are
    raised as `requests.HTTPError`.
    """
    http = session or requests.Session()

    def _get(url: str) -> bytes:
        response = http.get(url, timeout=timeout)
        response.raise_for_status()
        return response.content

    async def fetch(url: str) -> bytes:
        return await asyncio.to_thread(_get, url)

    return fetch


def sample_payload() -> bytes:
    """Return the bundled science quiz used when no real endpoint is configured."""
    return resources.files("quiz_engine.assets").joinpath(SAMPLE_PAYLOAD_NAME).read_bytes()


def simulated_fetcher(payload: Optional[bytes] = None, delay: float = 2.0) -> Fetcher:
    """Build a fetcher that returns canned bytes after a simulated network delay."""
    body = payload if payload is not None else sample_payload()

    async def fetch(url: str) -> bytes:
        logger.debug("Simulating fetch of %s (%.1fs delay)", url, delay)
        if delay > 0:
            await asyncio.sleep(delay)
        return body

    return fetch


def parse_remote_quiz(raw: bytes) -> Quiz:
    """Validate a JSON quiz document and convert it into the normalized model."""
    try:
        data = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise MalformedContent(f"response is not valid JSON: {exc}") from exc

    try:
        payload = RemoteQuizPayload.model_validate(data)
    except ValidationError as exc:
        raise MalformedContent(f"response does not match the quiz schema: {exc}") from exc

    if not payload.questions:
        raise EmptyQuiz("response contains no questions")

    questions: List[Question] = []
    for idx, item in enumerate(payload.questions):
        if not 0 <= item.correct_answer < len(item.options):
            raise MalformedContent(
                f"question {idx} has correctAnswer {item.correct_answer} "
                f"but only {len(item.options)} options"
            )
        try:
            questions.append(
                Question(
                    question=item.question,
                    options=item.options,
                    correct_index=item.correct_answer,
                )
            )
        except ValidationError as exc:
            raise MalformedContent(f"question {idx} is invalid: {exc}") from exc

    return Quiz(title=payload.title, questions=questions)


class RemoteQuizLoader(ContentLoader):
    """Load a quiz from a JSON document obtained through an injected fetcher."""

    label = "online quiz"

    def __init__(self, url: str, fetch: Fetcher):
        self.url = url
        self.fetch = fetch

    async def load(self) -> Quiz:
        try:
            raw = await self.fetch(self.url)
        except Exception as exc:  # noqa: BLE001 - any transport failure
            logger.warning("Fetching %s failed: %s", self.url, exc)
            raise SourceUnavailable(f"cannot fetch {self.url}: {exc}", cause=exc) from exc
        quiz = parse_remote_quiz(raw)
        logger.info("Parsed %d questions from %s", quiz.total, self.url)
        return quiz
