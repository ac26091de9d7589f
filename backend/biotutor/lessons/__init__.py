"""
Lesson catalog and quiz engine.
"""

from .catalog import LESSONS, Lesson, QuizQuestion, get_lesson, list_lessons, next_lesson
from .quiz import (
    CompletionStatus,
    LessonWalkthrough,
    ProgressTracker,
    QuizResult,
    QuizSession,
    QuizState,
    score_answers,
)

__all__ = [
    "LESSONS",
    "Lesson",
    "QuizQuestion",
    "get_lesson",
    "list_lessons",
    "next_lesson",
    "CompletionStatus",
    "LessonWalkthrough",
    "ProgressTracker",
    "QuizResult",
    "QuizSession",
    "QuizState",
    "score_answers",
]
