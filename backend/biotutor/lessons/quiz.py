"""
Quiz scoring and per-lesson learner state.

Everything here is in-memory and per learner session; the only durable
effect is the completion recorded through a ProgressTracker.
"""

from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional, Sequence
import logging

from pydantic import BaseModel

from biotutor.core.errors import (
    IncompleteQuizError,
    InvalidInputError,
    QuizLockedError,
)
from .catalog import LESSONS, Lesson, QuizQuestion


logger = logging.getLogger(__name__)


class QuestionResult(BaseModel):
    question_id: str
    answer: str
    correct_answer: str
    is_correct: bool


class QuizResult(BaseModel):
    correct: int
    total: int
    passed: bool
    results: List[QuestionResult]


def score_answers(questions: Sequence[QuizQuestion], answers: Mapping[str, str]) -> QuizResult:
    """
    Score a complete answer set by exact string comparison.

    The quiz is passed only when every answer is correct.

    Raises:
        IncompleteQuizError: at least one question has no answer
    """
    missing = [q.id for q in questions if not answers.get(q.id)]
    if missing:
        raise IncompleteQuizError(missing)

    results = [
        QuestionResult(
            question_id=q.id,
            answer=answers[q.id],
            correct_answer=q.correct_answer,
            is_correct=answers[q.id] == q.correct_answer,
        )
        for q in questions
    ]
    correct = sum(1 for r in results if r.is_correct)
    return QuizResult(
        correct=correct,
        total=len(questions),
        passed=correct == len(questions),
        results=results,
    )


class QuizState(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    ATTEMPTED = "attempted"


class QuizSession:
    """
    Quiz for one lesson in one learner session.

    NOT_STARTED -> IN_PROGRESS on start(); IN_PROGRESS -> ATTEMPTED on a
    complete submit(); changing an answer after an attempt goes back to
    IN_PROGRESS and clears the verdict. Once the lesson's completion is
    confirmed the session is locked and answers can no longer change.
    """

    def __init__(self, lesson: Lesson, already_completed: bool = False):
        self.lesson = lesson
        self.state = QuizState.NOT_STARTED
        self.answers: Dict[str, str] = {}
        self.passed: Optional[bool] = None
        self.result: Optional[QuizResult] = None
        self.locked = already_completed
        self.already_completed = already_completed

    def start(self) -> None:
        if self.already_completed:
            raise QuizLockedError()
        if self.state is QuizState.NOT_STARTED:
            self.state = QuizState.IN_PROGRESS

    def answer(self, question_id: str, option: str) -> None:
        if self.locked:
            raise QuizLockedError()
        if self.state is QuizState.NOT_STARTED:
            raise InvalidInputError("Start the quiz before answering")

        question = self.lesson.question(question_id)
        if question is None:
            raise InvalidInputError(f"Unknown question: {question_id}")
        if option not in question.options:
            raise InvalidInputError(f"Unknown option for question {question_id}")

        self.answers[question_id] = option
        if self.state is QuizState.ATTEMPTED:
            self.state = QuizState.IN_PROGRESS
            self.passed = None
            self.result = None

    def submit(self) -> QuizResult:
        """
        Score the current answers.

        Raises:
            IncompleteQuizError: some question is unanswered; state is unchanged
        """
        if self.locked:
            raise QuizLockedError()
        if self.state is QuizState.NOT_STARTED:
            raise InvalidInputError("Start the quiz before submitting")

        result = score_answers(self.lesson.questions, self.answers)
        self.state = QuizState.ATTEMPTED
        self.passed = result.passed
        self.result = result
        return result

    @property
    def can_complete(self) -> bool:
        return self.already_completed or self.passed is True

    def lock(self) -> None:
        self.locked = True
        self.already_completed = True


class CompletionStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"


class ProgressTracker:
    """
    Learner-side view of the completion ledger.

    ``mark_completed`` marks the lesson PENDING immediately, then calls the
    recorder and settles on CONFIRMED or FAILED. A failure is kept visible
    so the caller decides whether to retry.
    """

    def __init__(self, recorder: Callable[[str], object]):
        self.recorder = recorder
        self.statuses: Dict[str, CompletionStatus] = {}
        self.errors: Dict[str, Exception] = {}

    def load(self, titles) -> None:
        self.statuses = {title: CompletionStatus.CONFIRMED for title in titles}
        self.errors = {}

    def status(self, title: str) -> Optional[CompletionStatus]:
        return self.statuses.get(title)

    def is_completed(self, title: str) -> bool:
        return self.statuses.get(title) is CompletionStatus.CONFIRMED

    def mark_completed(self, title: str) -> CompletionStatus:
        if self.is_completed(title):
            return CompletionStatus.CONFIRMED

        self.statuses[title] = CompletionStatus.PENDING
        self.errors.pop(title, None)
        try:
            self.recorder(title)
        except Exception as exc:
            logger.warning(f"Failed to save lesson progress for '{title}': {exc}")
            self.statuses[title] = CompletionStatus.FAILED
            self.errors[title] = exc
            return CompletionStatus.FAILED

        self.statuses[title] = CompletionStatus.CONFIRMED
        return CompletionStatus.CONFIRMED


class LessonWalkthrough:
    """
    Walks a learner through the catalog in order.

    Holds the selected lesson and its quiz; completing a lesson goes
    through the tracker, and moving on resets all per-lesson state.
    """

    def __init__(self, tracker: ProgressTracker, lessons: Sequence[Lesson] = LESSONS):
        self.tracker = tracker
        self.lessons = list(lessons)
        self.lesson: Optional[Lesson] = None
        self.quiz: Optional[QuizSession] = None

    def select(self, title: str) -> Lesson:
        for lesson in self.lessons:
            if lesson.title == title:
                self.lesson = lesson
                self.quiz = QuizSession(lesson, already_completed=self.tracker.is_completed(title))
                return lesson
        raise InvalidInputError(f"Unknown lesson: {title}")

    @property
    def can_complete(self) -> bool:
        return self.quiz is not None and self.quiz.can_complete

    @property
    def next_lesson(self) -> Optional[Lesson]:
        if self.lesson is None:
            return None
        index = self.lessons.index(self.lesson)
        return self.lessons[index + 1] if index + 1 < len(self.lessons) else None

    def complete(self) -> CompletionStatus:
        """
        Record completion of the selected lesson.

        Raises:
            InvalidInputError: no lesson selected, or the quiz is not passed
        """
        if self.lesson is None or self.quiz is None:
            raise InvalidInputError("No lesson selected")
        if not self.quiz.can_complete:
            raise InvalidInputError("Complete the knowledge check first")

        status = self.tracker.mark_completed(self.lesson.title)
        if status is CompletionStatus.CONFIRMED:
            self.quiz.lock()
        return status

    def complete_and_next(self) -> Optional[Lesson]:
        """Complete the current lesson and select the next one; None after the last."""
        self.complete()
        upcoming = self.next_lesson
        self.lesson = None
        self.quiz = None
        if upcoming is None:
            return None
        return self.select(upcoming.title)
