from .engine import QuizSessionEngine, describe_load_error
from .report import SessionSummary, format_summary, quiz_to_markdown, summarize

__all__ = [
    "QuizSessionEngine",
    "SessionSummary",
    "describe_load_error",
    "format_summary",
    "quiz_to_markdown",
    "summarize",
]
