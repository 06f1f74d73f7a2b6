"""Shared fixtures for quiz engine tests."""

from __future__ import annotations

import asyncio
from typing import Optional

import pytest

from quiz_engine.loaders.base import ContentLoader
from quiz_engine.models import Question, Quiz

ARITHMETIC_XML = (
    '<quiz title="T"><question><text>2+2?</text><option>3</option><option>4</option>'
    "<correct_answer>1</correct_answer></question></quiz>"
)


class FakeLoader(ContentLoader):
    """Loader double returning a fixed quiz (or raising) after an optional delay."""

    label = "fake quiz"

    def __init__(
        self,
        quiz: Optional[Quiz] = None,
        error: Optional[BaseException] = None,
        delay: float = 0.0,
        ignore_cancel: bool = False,
    ):
        self.quiz = quiz
        self.error = error
        self.delay = delay
        self.ignore_cancel = ignore_cancel
        self.calls = 0

    async def load(self) -> Quiz:
        self.calls += 1
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            if not self.ignore_cancel:
                raise
        if self.error is not None:
            raise self.error
        return self.quiz


@pytest.fixture
def arithmetic_xml() -> str:
    return ARITHMETIC_XML


@pytest.fixture
def sample_quiz() -> Quiz:
    """Three-question quiz whose correct answers are 0, 1 and 2."""
    return Quiz(
        title="Physics Basics",
        questions=[
            Question(
                "What is the unit of force?",
                ["Newton", "Joule", "Watt", "Pascal"],
                0,
            ),
            Question(
                "What is acceleration?",
                ["Rate of change of position", "Rate of change of velocity", "Rate of change of force"],
                1,
            ),
            Question(
                "Which quantity is a vector?",
                ["Mass", "Energy", "Momentum"],
                2,
            ),
        ],
    )


@pytest.fixture
def other_quiz() -> Quiz:
    return Quiz(title="Other", questions=[Question("Yes?", ["yes", "no"], 0)])
