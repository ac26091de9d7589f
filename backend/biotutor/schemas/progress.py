"""
Lesson progress schemas.
"""

from typing import Any, List
from pydantic import BaseModel, ConfigDict, Field


class CompletedLessons(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    completed_lesson_titles: List[str] = Field(default_factory=list, alias="completedLessonTitles")


class ProgressMessage(BaseModel):
    message: str


class CompletionRequest(BaseModel):
    """Body of a completion request; the title is validated by the service."""
    model_config = ConfigDict(populate_by_name=True)

    lesson_title: Any = Field(default=None, alias="lessonTitle")
