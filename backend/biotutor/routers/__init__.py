"""
API routers for BioTutor.

This module contains all API endpoint routers:
- auth: Registration, login, logout and session lookup
- progress: Lesson completion tracking
- lessons: Lesson catalog, quiz scoring and insights
- chat: Streaming tutor chat
"""

from fastapi import APIRouter

# Import individual routers
from .auth import router as auth_router
from .progress import router as progress_router
from .lessons import router as lessons_router
from .chat import router as chat_router

# Create main API router
api_router = APIRouter()

# Include all routers with their prefixes
api_router.include_router(
    auth_router,
    tags=["authentication"]
)

# Progress routes first so "/lessons/progress" is not taken for a lesson title
api_router.include_router(
    progress_router,
    prefix="/lessons",
    tags=["progress"]
)

api_router.include_router(
    lessons_router,
    prefix="/lessons",
    tags=["lessons"]
)

api_router.include_router(
    chat_router,
    prefix="/chat",
    tags=["chat"]
)

# Export all routers
__all__ = [
    "api_router",
    "auth_router",
    "progress_router",
    "lessons_router",
    "chat_router"
]
