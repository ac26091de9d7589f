"""
HTTP client for the lesson progress API.

Plugs into ProgressTracker so a learner-side walkthrough persists
completions through the server.
"""

from typing import List, Optional

import httpx

from biotutor.core.errors import InternalError, InvalidCredentialsError, UnauthenticatedError
from .quiz import ProgressTracker


class ProgressClient:
    def __init__(self, base_url: str = "http://localhost:8000", client: Optional[httpx.Client] = None):
        self.http = client or httpx.Client(base_url=base_url, timeout=30.0)

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "ProgressClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def login(self, email: str, password: str) -> None:
        """Log in; the session cookie is kept by the underlying client."""
        response = self.http.post("/api/auth/login", json={"email": email, "password": password})
        if response.status_code == httpx.codes.UNAUTHORIZED:
            raise InvalidCredentialsError()
        self._raise_for_status(response)

    def fetch_completed(self) -> List[str]:
        response = self.http.get("/api/lessons/progress")
        self._raise_for_status(response)
        titles = response.json().get("completedLessonTitles")
        if not isinstance(titles, list):
            raise InternalError("Unexpected progress payload")
        return titles

    def record_completion(self, lesson_title: str) -> bool:
        """Returns True if newly recorded, False if it was already completed."""
        response = self.http.post("/api/lessons/progress", json={"lessonTitle": lesson_title})
        self._raise_for_status(response)
        return response.status_code == httpx.codes.CREATED

    def tracker(self) -> ProgressTracker:
        """A tracker seeded with the server's completions that records through this client."""
        tracker = ProgressTracker(self.record_completion)
        tracker.load(self.fetch_completed())
        return tracker

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.status_code == httpx.codes.UNAUTHORIZED:
            raise UnauthenticatedError()
        if response.is_error:
            raise InternalError(f"Progress API returned {response.status_code}")
