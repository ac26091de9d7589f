"""
Progress router for BioTutor.

Lists and records the calling account's completed lessons.
"""

from typing import Dict, Any

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from biotutor.core.database import get_db
from biotutor.core.errors import BioTutorError
from biotutor.models.progress import CompletionOutcome
from biotutor.routers.auth import get_current_account_id
from biotutor.schemas.progress import CompletedLessons, CompletionRequest, ProgressMessage
from biotutor.services import progress as progress_service


router = APIRouter()


@router.get("/progress", response_model=CompletedLessons)
def get_progress(
    account_id: str = Depends(get_current_account_id),
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    Get the titles of the lessons the current user has completed.
    """
    try:
        titles = progress_service.list_completions(db, account_id)
    except BioTutorError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)

    return {"completedLessonTitles": titles}


@router.post("/progress", response_model=ProgressMessage, status_code=status.HTTP_201_CREATED)
def mark_completed(
    body: CompletionRequest,
    response: Response,
    account_id: str = Depends(get_current_account_id),
    db: Session = Depends(get_db)
) -> Dict[str, str]:
    """
    Mark a lesson as completed for the current user.

    201 for a new completion, 200 if it was already recorded.
    """
    try:
        outcome = progress_service.record_completion(db, account_id, body.lesson_title)
    except BioTutorError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)

    if outcome is CompletionOutcome.ALREADY_COMPLETED:
        response.status_code = status.HTTP_200_OK
        return {"message": "Lesson already marked as complete"}
    return {"message": "Progress saved successfully"}
