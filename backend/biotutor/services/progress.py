"""
Progress service for BioTutor.

Reads and records lesson completions. Every query is scoped to the
caller's own account id.
"""

from typing import List
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from biotutor.core.errors import InvalidInputError, StoreUnavailableError, UnauthenticatedError
from biotutor.models.progress import CompletedLesson, CompletionOutcome


logger = logging.getLogger(__name__)


def insert_completion(db: Session, account_id: str, lesson_title: str) -> CompletionOutcome:
    """
    Insert a completion row and report what happened.

    A unique violation on (user_id, lesson_title) is returned as
    ALREADY_COMPLETED. Any other integrity failure (an account missing
    from the store, for one) leaves no matching row and is re-raised, as
    are other database errors.
    """
    db.add(CompletedLesson(user_id=account_id, lesson_title=lesson_title))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if completion_exists(db, account_id, lesson_title):
            return CompletionOutcome.ALREADY_COMPLETED
        raise
    return CompletionOutcome.CREATED


def completion_exists(db: Session, account_id: str, lesson_title: str) -> bool:
    query = db.query(CompletedLesson.id).filter(
        CompletedLesson.user_id == account_id,
        CompletedLesson.lesson_title == lesson_title,
    )
    return db.query(query.exists()).scalar()


def list_completions(db: Session, account_id: str) -> List[str]:
    """
    Titles of the lessons the account has completed, oldest first.

    Raises:
        UnauthenticatedError: no account id
        StoreUnavailableError: the ledger could not be read
    """
    if not account_id:
        raise UnauthenticatedError()

    try:
        rows = (
            db.query(CompletedLesson.lesson_title)
            .filter(CompletedLesson.user_id == account_id)
            .order_by(CompletedLesson.completed_at, CompletedLesson.id)
            .all()
        )
    except SQLAlchemyError:
        logger.exception(f"Failed to fetch progress for account {account_id}")
        raise StoreUnavailableError("Failed to fetch progress")

    return [row.lesson_title for row in rows]


def record_completion(db: Session, account_id: str, lesson_title) -> CompletionOutcome:
    """
    Record that the account completed a lesson.

    Idempotent: completing the same lesson again returns
    ALREADY_COMPLETED instead of failing.

    Raises:
        UnauthenticatedError: no account id
        InvalidInputError: lesson_title missing, blank or not a string
        StoreUnavailableError: any store failure other than the duplicate
    """
    if not account_id:
        raise UnauthenticatedError()

    if not isinstance(lesson_title, str) or not lesson_title.strip():
        raise InvalidInputError("Lesson title is required")

    try:
        outcome = insert_completion(db, account_id, lesson_title)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Failed to save progress for account {account_id}")
        raise StoreUnavailableError("Failed to save progress")

    if outcome is CompletionOutcome.CREATED:
        logger.info(f"Account {account_id} completed lesson '{lesson_title}'")
    else:
        logger.info(f"Account {account_id} already completed lesson '{lesson_title}'")
    return outcome
