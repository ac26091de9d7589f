"""
Database models for BioTutor.

This module contains all SQLAlchemy models for the application:
- User model for authentication
- CompletedLesson model for the lesson completion ledger
"""

from biotutor.core.database import Base

# Import all models to ensure they're registered with SQLAlchemy
from .user import User
from .progress import CompletedLesson, CompletionOutcome

# Export all models
__all__ = [
    "Base",
    "User",
    "CompletedLesson",
    "CompletionOutcome",
]
