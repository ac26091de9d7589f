"""
Lesson catalog and quiz schemas.
"""

from typing import Dict, List
from pydantic import BaseModel, ConfigDict, Field


class LessonSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    title: str
    description: str
    model_file: str = Field(alias="modelFile")


class LessonList(BaseModel):
    lessons: List[LessonSummary]


class QuestionView(BaseModel):
    """A quiz question as shown to the learner, without the answer."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    question_text: str = Field(alias="questionText")
    options: List[str]


class LessonDetail(LessonSummary):
    definition: str
    questions: List[QuestionView]


class QuizSubmission(BaseModel):
    answers: Dict[str, str] = Field(default_factory=dict)


class QuestionResultView(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question_id: str = Field(alias="questionId")
    answer: str
    correct_answer: str = Field(alias="correctAnswer")
    is_correct: bool = Field(alias="isCorrect")


class QuizResultView(BaseModel):
    correct: int
    total: int
    passed: bool
    results: List[QuestionResultView]
