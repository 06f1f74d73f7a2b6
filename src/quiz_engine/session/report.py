from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from quiz_engine.models import AnswerRecord, Quiz, Screen, SessionState


class SessionSummary(BaseModel):
    """Result of a completed session, ready for display."""

    title: str
    score: int
    total_questions: int
    percentage: float
    answers: List[AnswerRecord] = Field(default_factory=list)
    review_questions: List[str] = Field(default_factory=list)


def summarize(state: SessionState) -> SessionSummary:
    """Build a summary from a completed session state."""
    if state.screen is not Screen.COMPLETED or state.quiz is None:
        raise ValueError("Only completed sessions can be summarized.")
    quiz = state.quiz
    total = quiz.total
    review = [
        quiz.questions[record.question_index].question
        for record in state.answers
        if not record.is_correct
    ]
    return SessionSummary(
        title=quiz.title,
        score=state.score,
        total_questions=total,
        percentage=state.score / total * 100 if total else 0.0,
        answers=list(state.answers),
        review_questions=review,
    )


def format_summary(summary: SessionSummary) -> str:
    """Render a plain-text recap of a finished quiz."""
    lines: list[str] = [
        f"Quiz: {summary.title}",
        f"Score: {summary.score}/{summary.total_questions} ({summary.percentage:.0f}%)",
    ]
    for record in summary.answers:
        status = "correct" if record.is_correct else "incorrect"
        lines.append(f"- Q{record.question_index + 1}: {status}")
    if summary.review_questions:
        lines.append("Review: " + "; ".join(summary.review_questions))
    return "\n".join(lines)


def quiz_to_markdown(quiz: Quiz) -> str:
    """Convert a Quiz to markdown, answer key included, for export."""
    count = quiz.total
    lines: list[str] = [f"# {quiz.title} - {count} Question{'s' if count != 1 else ''}", ""]

    for idx, question in enumerate(quiz.questions):
        lines.append(f"## Question {idx + 1}")
        lines.append(question.question)
        lines.append("")
        for option_idx, option in enumerate(question.options):
            lines.append(f"{chr(65 + option_idx)}. {option}")
        lines.append("")
        correct_letter = chr(65 + question.correct_index)
        lines.append(f"**Answer: {correct_letter}. {question.options[question.correct_index]}**")
        lines.append("")
        lines.append("---")
        lines.append("")

    return "\n".join(lines)
