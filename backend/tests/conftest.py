"""
Pytest configuration and shared fixtures.

Environment is set before the application is imported so settings, the
engine and the password context pick up the test values.
"""
import os

os.environ["TESTING"] = "1"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["LLM_API_KEY"] = "test-key"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from biotutor.core.database import DatabaseManager, build_engine, get_db
from biotutor import models  # noqa: F401
from biotutor.main import app
from biotutor.routers.chat import get_completion_proxy
from biotutor.services.completion import CompletionStreamProxy


class FakeProvider:
    """Completion provider yielding canned fragments, optionally failing."""

    def __init__(self, fragments=(), error=None, fail_before=False):
        self.fragments = list(fragments)
        self.error = error
        self.fail_before = fail_before
        self.calls = []
        self.closed = False

    async def stream(self, messages):
        self.calls.append(messages)
        try:
            if self.fail_before:
                raise self.error
            for fragment in self.fragments:
                yield fragment
            if self.error is not None:
                raise self.error
        finally:
            self.closed = True


# ----- In-memory DB -----
@pytest.fixture
def engine():
    engine = build_engine("sqlite:///:memory:")
    DatabaseManager.create_all_tables(bind=engine)
    yield engine
    DatabaseManager.drop_all_tables(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def fake_provider():
    return FakeProvider(fragments=["Hel", "lo"])


@pytest.fixture
def api_client(session_factory, fake_provider):
    """TestClient with the in-memory DB and the fake completion provider."""

    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_completion_proxy] = lambda: CompletionStreamProxy(fake_provider)
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def logged_in_client(api_client):
    """API client with a registered, logged-in user."""
    api_client.post(
        "/api/register",
        json={"name": "Alice", "email": "alice@x.com", "password": "secret1"},
    )
    response = api_client.post(
        "/api/auth/login",
        json={"email": "alice@x.com", "password": "secret1"},
    )
    assert response.status_code == 200
    return api_client
