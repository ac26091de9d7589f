import json

import httpx
import pytest

from biotutor.core.errors import InternalError, InvalidCredentialsError, UnauthenticatedError
from biotutor.lessons.client import ProgressClient
from biotutor.lessons.quiz import CompletionStatus


class FakeProgressServer:
    """Mimics the progress endpoints for a single logged-in account."""

    def __init__(self, completed=()):
        self.completed = list(completed)
        self.logged_in = False

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/auth/login":
            body = json.loads(request.content)
            if body.get("password") != "secret1":
                return httpx.Response(401, json={"ok": False, "error": "CredentialsSignin"})
            self.logged_in = True
            return httpx.Response(200, json={"ok": True})

        if not self.logged_in:
            return httpx.Response(401, json={"message": "Unauthorized"})

        if request.method == "GET":
            return httpx.Response(200, json={"completedLessonTitles": self.completed})

        title = json.loads(request.content)["lessonTitle"]
        if title in self.completed:
            return httpx.Response(200, json={"message": "Lesson already marked as complete"})
        self.completed.append(title)
        return httpx.Response(201, json={"message": "Progress saved successfully"})


def make_client(server):
    http = httpx.Client(base_url="http://testserver", transport=httpx.MockTransport(server))
    return ProgressClient(client=http)


def test_record_reports_new_versus_repeat():
    server = FakeProgressServer()
    with make_client(server) as client:
        client.login("alice@x.com", "secret1")

        assert client.record_completion("Amoeba") is True
        assert client.record_completion("Amoeba") is False
        assert client.fetch_completed() == ["Amoeba"]


def test_bad_login_raises_credentials_error():
    with make_client(FakeProgressServer()) as client:
        with pytest.raises(InvalidCredentialsError):
            client.login("alice@x.com", "wrong")


def test_requests_without_session_raise():
    with make_client(FakeProgressServer()) as client:
        with pytest.raises(UnauthenticatedError):
            client.fetch_completed()


def test_server_error_raises_internal_error():
    client = make_client(lambda request: httpx.Response(503))
    with pytest.raises(InternalError):
        client.record_completion("Lungs")


def test_tracker_seeded_from_server():
    server = FakeProgressServer(completed=["Human Brain"])
    with make_client(server) as client:
        client.login("alice@x.com", "secret1")
        tracker = client.tracker()

        assert tracker.is_completed("Human Brain")
        assert tracker.mark_completed("Lungs") is CompletionStatus.CONFIRMED
        assert server.completed == ["Human Brain", "Lungs"]
