"""
Domain errors for BioTutor.

Services raise these; routers translate them into HTTP responses. Each
error carries the status code it maps to and a message that is safe to
return to the caller. Internal detail belongs in the logs only.
"""

from typing import List, Optional
from fastapi import status


class BioTutorError(Exception):
    """Base class for all domain errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "An internal server error occurred"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidInputError(BioTutorError):
    """Malformed request body or missing required field."""
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid input"


class WeakPasswordError(InvalidInputError):
    message = "Password is too short"


class IncompleteQuizError(InvalidInputError):
    """Raised when a quiz is submitted with unanswered questions."""

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__("Please answer all questions before submitting")


class UnauthenticatedError(BioTutorError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class InvalidCredentialsError(UnauthenticatedError):
    """
    Login failure.

    Unknown email, account without a password, and wrong password all
    raise this with the same message.
    """
    message = "Invalid email or password"

    def __init__(self):
        super().__init__()


class NotFoundError(BioTutorError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class ConflictError(BioTutorError):
    status_code = status.HTTP_409_CONFLICT
    message = "Conflict"


class DuplicateEmailError(ConflictError):
    message = "User with this email already exists"


class QuizLockedError(ConflictError):
    message = "Lesson already completed; the quiz is read-only"


class InternalError(BioTutorError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "An internal server error occurred"


class StoreUnavailableError(InternalError):
    """The database failed for a reason other than a constraint violation."""


class CompletionProviderError(InternalError):
    """The completion provider failed before producing any output."""
    message = "Internal server error"
