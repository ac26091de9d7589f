"""
Progress tracking models for BioTutor.

Defines the CompletedLesson ledger: one row per (user, lesson) the user
has finished.
"""

from datetime import datetime
from enum import Enum
from sqlalchemy import Integer, String, DateTime, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from sqlalchemy.sql import func

from biotutor.core.database import Base


class CompletionOutcome(str, Enum):
    """Result of recording a completion at the store boundary."""
    CREATED = "created"
    ALREADY_COMPLETED = "already_completed"


class CompletedLesson(Base):
    """
    Durable proof that a user finished a lesson.

    Rows are create-only. The unique constraint on (user_id, lesson_title)
    makes a second insert for the same pair fail, which callers treat as a
    confirmation rather than an error.
    """
    __tablename__ = "completed_lessons"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )
    lesson_title: Mapped[str] = mapped_column(String(255), nullable=False)

    completed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    # Relationships
    user = relationship("User", back_populates="completed_lessons")

    # Table constraints
    __table_args__ = (
        UniqueConstraint("user_id", "lesson_title", name="uq_user_lesson_completion"),
        Index("idx_completed_lessons_user", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<CompletedLesson(user_id={self.user_id}, lesson_title='{self.lesson_title}')>"
