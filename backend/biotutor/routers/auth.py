"""
Authentication router for BioTutor.

Handles registration, credential login, logout and session lookup, and
provides the dependency that resolves the calling account.
"""

from typing import Dict, Any
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from biotutor.core.database import get_db
from biotutor.core.errors import (
    BioTutorError,
    InvalidCredentialsError,
    UnauthenticatedError,
)
from biotutor.core.session import authorize, clear_session, issue_session
from biotutor.models.user import User
from biotutor.schemas.auth import (
    LoginResponse,
    RegisterResponse,
    SessionUser,
    UserLogin,
    UserRegister,
    UserResponse,
)
from biotutor.services import accounts


logger = logging.getLogger(__name__)

router = APIRouter()


# Dependencies
def get_current_account_id(request: Request) -> str:
    """
    Get the account id of the authenticated caller from the session token.
    """
    try:
        return authorize(request)
    except UnauthenticatedError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=exc.message,
            headers={"WWW-Authenticate": "Bearer"},
        )


def http_error(exc: BioTutorError) -> HTTPException:
    """Translate a domain error into the HTTPException a route raises."""
    return HTTPException(status_code=exc.status_code, detail=exc.message)


# Endpoints
@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    Register a new account.
    """
    try:
        new_user = accounts.register(
            db,
            email=user_data.email,
            password=user_data.password,
            name=user_data.name,
        )
    except BioTutorError as exc:
        raise http_error(exc)

    return {
        "user": UserResponse(**new_user.to_dict()),
        "message": "User created successfully",
    }


@router.post("/auth/login", response_model=LoginResponse, response_model_exclude_none=True)
def login(
    credentials: UserLogin,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    Credential login. Sets the session cookie on success.

    Every credential failure gets the same response.
    """
    try:
        user = accounts.authenticate(db, credentials.email, credentials.password)
    except InvalidCredentialsError:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"ok": False, "error": "CredentialsSignin"},
        )
    except BioTutorError as exc:
        raise http_error(exc)

    issue_session(response, user.id, user.email)
    return {"ok": True}


@router.post("/auth/logout")
def logout(response: Response) -> Dict[str, str]:
    """
    Clear the session cookie. Tokens are stateless, so nothing is revoked server-side.
    """
    clear_session(response)
    return {"message": "Successfully logged out"}


@router.get("/auth/session")
def get_session(
    request: Request,
    db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """
    Current session user, or an empty object when not logged in.
    """
    try:
        account_id = authorize(request)
    except UnauthenticatedError:
        return {}

    try:
        user = db.query(User).filter(User.id == account_id).first()
    except SQLAlchemyError:
        logger.exception("Session lookup failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An internal server error occurred",
        )

    if user is None:
        return {}
    return {"user": SessionUser(id=user.id, email=user.email, name=user.name).model_dump()}
