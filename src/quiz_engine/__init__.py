"""
Multiple-choice quiz session engine.

Loads quizzes from XML documents or remote JSON endpoints into an immutable model and
drives a session through menu, loading, question and result screens.
"""

from .config.loader import load_settings
from .models import Question, Quiz, Screen, SessionState
from .session import QuizSessionEngine

__all__ = [
    "Question",
    "Quiz",
    "QuizSessionEngine",
    "Screen",
    "SessionState",
    "load_settings",
]
