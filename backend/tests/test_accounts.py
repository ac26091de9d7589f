import pytest

from biotutor.core.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidInputError,
    WeakPasswordError,
)
from biotutor.models.user import User
from biotutor.services import accounts


def test_register_normalizes_email_and_hashes_password(db_session):
    user = accounts.register(db_session, "Alice@X.com ", "secret1", name="Alice")

    assert user.id
    assert user.email == "alice@x.com"
    assert user.name == "Alice"
    assert user.hashed_password and user.hashed_password != "secret1"
    assert "hashed_password" not in user.to_dict()


def test_register_blank_name_stored_as_null(db_session):
    user = accounts.register(db_session, "bob@x.com", "secret1", name="  ")
    assert user.name is None


@pytest.mark.parametrize("email", ["alice@x.com", "ALICE@X.COM", "Alice@x.Com"])
def test_duplicate_registration_any_casing_conflicts(db_session, email):
    original = accounts.register(db_session, "alice@x.com", "secret1", name="Alice")
    original_hash = original.hashed_password

    with pytest.raises(DuplicateEmailError):
        accounts.register(db_session, email, "another1", name="Mallory")

    users = db_session.query(User).all()
    assert len(users) == 1
    assert users[0].name == "Alice"
    assert users[0].hashed_password == original_hash


def test_register_rejects_short_password(db_session):
    with pytest.raises(WeakPasswordError):
        accounts.register(db_session, "alice@x.com", "12345")
    assert db_session.query(User).count() == 0


@pytest.mark.parametrize("email,password", [(None, "secret1"), ("alice@x.com", None), ("", "")])
def test_register_requires_email_and_password(db_session, email, password):
    with pytest.raises(InvalidInputError):
        accounts.register(db_session, email, password)


def test_authenticate_with_correct_password(db_session):
    registered = accounts.register(db_session, "alice@x.com", "secret1")

    user = accounts.authenticate(db_session, "ALICE@x.com", "secret1")

    assert user.id == registered.id


def test_credential_failures_are_indistinguishable(db_session):
    accounts.register(db_session, "alice@x.com", "secret1")
    db_session.add(User(email="nohash@x.com", hashed_password=None))
    db_session.commit()

    errors = []
    for email, password in [
        ("alice@x.com", "wrong"),
        ("nobody@x.com", "secret1"),
        ("nohash@x.com", "secret1"),
        ("alice@x.com", ""),
    ]:
        with pytest.raises(InvalidCredentialsError) as exc_info:
            accounts.authenticate(db_session, email, password)
        errors.append(exc_info.value)

    assert len({(type(e), e.message, e.status_code) for e in errors}) == 1


def test_concurrent_duplicate_caught_by_unique_constraint(db_session, monkeypatch):
    accounts.register(db_session, "alice@x.com", "secret1", name="Alice")
    # Simulate a concurrent registration committing between lookup and insert
    monkeypatch.setattr(accounts, "get_user_by_email", lambda db, email: None)

    with pytest.raises(DuplicateEmailError):
        accounts.register(db_session, "ALICE@x.com", "another1")

    assert db_session.query(User).filter_by(email="alice@x.com").count() == 1
    assert accounts.register(db_session, "bob@x.com", "secret1").email == "bob@x.com"
    assert db_session.query(User).count() == 2
