"""
Lessons router for BioTutor.

Serves the static lesson catalog, scores quiz submissions and streams AI
insights for a lesson.
"""

from typing import Dict, Any, Optional

from fastapi import APIRouter, Depends

from biotutor.core.errors import IncompleteQuizError, NotFoundError
from biotutor.lessons.catalog import Lesson, get_lesson, list_lessons
from biotutor.lessons.prompts import insight_messages
from biotutor.lessons.quiz import score_answers
from biotutor.routers.auth import http_error
from biotutor.routers.chat import get_completion_proxy, stream_response
from biotutor.schemas.chat import InsightRequest
from biotutor.schemas.lessons import (
    LessonDetail,
    LessonList,
    QuizResultView,
    QuizSubmission,
)
from biotutor.services.completion import CompletionStreamProxy


router = APIRouter()


def get_lesson_or_404(title: str) -> Lesson:
    lesson = get_lesson(title)
    if lesson is None:
        raise http_error(NotFoundError("Lesson not found"))
    return lesson


@router.get("", response_model=LessonList)
def get_catalog() -> Dict[str, Any]:
    """
    List all lessons in catalog order.
    """
    return {
        "lessons": [
            {
                "title": lesson.title,
                "description": lesson.description,
                "model_file": lesson.model_file,
            }
            for lesson in list_lessons()
        ]
    }


@router.get("/{title}", response_model=LessonDetail)
def get_lesson_detail(title: str) -> Dict[str, Any]:
    """
    Get a lesson with its definition and quiz questions (answers withheld).
    """
    lesson = get_lesson_or_404(title)
    return {
        "title": lesson.title,
        "description": lesson.description,
        "model_file": lesson.model_file,
        "definition": lesson.definition,
        "questions": [
            {"id": q.id, "question_text": q.question_text, "options": list(q.options)}
            for q in lesson.questions
        ],
    }


@router.post("/{title}/quiz", response_model=QuizResultView)
def submit_quiz(title: str, submission: QuizSubmission) -> Dict[str, Any]:
    """
    Score a quiz submission. Every question must be answered.
    """
    lesson = get_lesson_or_404(title)
    try:
        result = score_answers(lesson.questions, submission.answers)
    except IncompleteQuizError as exc:
        raise http_error(exc)
    return result.model_dump()


@router.post("/{title}/insight")
async def get_insight(
    title: str,
    body: Optional[InsightRequest] = None,
    proxy: CompletionStreamProxy = Depends(get_completion_proxy)
):
    """
    Stream a short AI insight about the lesson.
    """
    lesson = get_lesson_or_404(title)
    question = body.question if body else None
    return await stream_response(proxy, insight_messages(lesson, question))
