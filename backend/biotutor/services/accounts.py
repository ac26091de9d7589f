"""
Account service for BioTutor.

Registers accounts and verifies credentials against the users table.
"""

from typing import Optional
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from biotutor.core.config import settings
from biotutor.core.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidInputError,
    StoreUnavailableError,
    WeakPasswordError,
)
from biotutor.core.security import get_password_hash, verify_password
from biotutor.models.user import User


logger = logging.getLogger(__name__)


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def authenticate(db: Session, email: Optional[str], password: Optional[str]) -> User:
    """
    Verify credentials and return the matching account.

    Unknown email, an account without a stored hash, and a wrong password
    all raise the same InvalidCredentialsError.

    Raises:
        InvalidCredentialsError: the credentials do not match an account
        StoreUnavailableError: the users table could not be read
    """
    email = normalize_email(email)
    if not email or not password:
        raise InvalidCredentialsError()

    try:
        user = get_user_by_email(db, email)
    except SQLAlchemyError:
        logger.exception("Credential lookup failed")
        raise StoreUnavailableError()

    if user is None or not user.hashed_password:
        logger.info("Login failed")
        raise InvalidCredentialsError()

    if not verify_password(password, user.hashed_password):
        logger.info("Login failed")
        raise InvalidCredentialsError()

    logger.info(f"Login succeeded for account {user.id}")
    return user


def register(
    db: Session,
    email: Optional[str],
    password: Optional[str],
    name: Optional[str] = None
) -> User:
    """
    Create a new account.

    Raises:
        InvalidInputError: email or password missing
        WeakPasswordError: password shorter than MIN_PASSWORD_LENGTH
        DuplicateEmailError: the lower-cased email is already registered,
            including when a concurrent registration wins the insert
        StoreUnavailableError: any other database failure
    """
    email = normalize_email(email)
    if not email or not password:
        raise InvalidInputError("Email and password are required")

    if len(password) < settings.MIN_PASSWORD_LENGTH:
        raise WeakPasswordError(
            f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters long"
        )

    try:
        existing_user = get_user_by_email(db, email)
    except SQLAlchemyError:
        logger.exception("Registration lookup failed")
        raise StoreUnavailableError()

    if existing_user:
        raise DuplicateEmailError()

    new_user = User(
        email=email,
        name=(name or "").strip() or None,
        hashed_password=get_password_hash(password),
    )

    try:
        db.add(new_user)
        db.commit()
    except IntegrityError:
        # Lost the race to a concurrent registration
        db.rollback()
        raise DuplicateEmailError()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Registration insert failed")
        raise StoreUnavailableError()

    db.refresh(new_user)
    logger.info(f"Account registered: {new_user.id}")
    return new_user
