"""
User model for BioTutor.

Defines the User table with authentication fields and the relationship to
lesson completion records.
"""

from datetime import datetime
from typing import Optional
import uuid
from sqlalchemy import String, DateTime
from sqlalchemy.orm import relationship, Mapped, mapped_column
from sqlalchemy.sql import func

from biotutor.core.database import Base


def generate_account_id() -> str:
    return uuid.uuid4().hex


class User(Base):
    """
    Account used for authentication.

    ``email`` is always stored lower-cased, which makes the unique index
    case-insensitive. ``hashed_password`` is nullable: accounts created by
    non-credential flows have none and can never log in with a password.
    """
    __tablename__ = "users"

    # Primary key
    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_account_id)

    # Authentication fields
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False
    )
    hashed_password: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Profile fields
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    # Relationships
    completed_lessons = relationship(
        "CompletedLesson",
        back_populates="user",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"

    def to_dict(self) -> dict:
        """Convert user to its public dictionary representation (no password hash)."""
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
