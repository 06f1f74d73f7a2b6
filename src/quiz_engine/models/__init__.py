from .quiz import AnswerRecord, Question, Quiz, Screen, SessionState

__all__ = [
    "AnswerRecord",
    "Question",
    "Quiz",
    "Screen",
    "SessionState",
]
