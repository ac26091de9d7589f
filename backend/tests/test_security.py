from datetime import timedelta

from jose import jwt

from biotutor.core.config import settings
from biotutor.core.security import (
    create_access_token,
    get_password_hash,
    verify_password,
    verify_token,
)


def test_password_hash_roundtrip():
    hashed = get_password_hash("secret1")
    assert hashed != "secret1"
    assert verify_password("secret1", hashed)
    assert not verify_password("secret2", hashed)


def test_verify_password_rejects_garbage_hash():
    assert verify_password("secret1", "not-a-hash") is False


def test_token_carries_account_id():
    token = create_access_token("acct-1", additional_claims={"email": "a@x.com"})
    payload = verify_token(token)
    assert payload["sub"] == "acct-1"
    assert payload["email"] == "a@x.com"
    assert "exp" in payload and "iat" in payload


def test_subject_cannot_be_overridden_by_claims():
    token = create_access_token("acct-1", additional_claims={"sub": "acct-2"})
    assert verify_token(token)["sub"] == "acct-1"


def test_expired_token_rejected():
    token = create_access_token("acct-1", expires_delta=timedelta(seconds=-10))
    assert verify_token(token) is None


def test_token_signed_with_other_key_rejected():
    forged = jwt.encode({"sub": "acct-1"}, "some-other-key", algorithm=settings.ALGORITHM)
    assert verify_token(forged) is None


def test_malformed_token_rejected():
    assert verify_token("not.a.token") is None
    assert verify_token("") is None
