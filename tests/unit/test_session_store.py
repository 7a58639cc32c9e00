from datetime import datetime
from datetime import timezone

import pytest

from app.core.exceptions import DuplicateAccountError
from app.core.exceptions import ErrorKind
from app.core.exceptions import InvalidCredentialsError
from app.services.session_store import SessionStore
from app.services.storage.kv_store import ACCOUNTS_KEY
from app.services.storage.kv_store import SESSION_KEY
from app.services.storage.kv_store import TOKEN_KEY
from app.services.storage.kv_store import KeyValueStore


@pytest.fixture
def store():
    return KeyValueStore()


@pytest.fixture
def sessions(store):
    fixed = datetime(2024, 9, 2, 8, 30, tzinfo=timezone.utc)
    tokens = iter(f"token-{i}" for i in range(100))
    return SessionStore(store, clock=lambda: fixed, token_factory=lambda: next(tokens))


def test_register_persists_session_without_password(sessions, store):
    session, token = sessions.register("a@b.fr", "pw", "Alice", "Sorbonne")

    assert session.email == "a@b.fr"
    assert session.institution == "Sorbonne"
    assert token == "token-0"
    assert store.get_item(TOKEN_KEY) == "token-0"
    assert "password" not in store.get_item(SESSION_KEY)
    # the account itself keeps the password for later logins
    assert store.get_item(ACCOUNTS_KEY)[0]["password"] == "pw"


def test_register_duplicate_email_fails(sessions):
    sessions.register("a@b.fr", "pw", "Alice", "")
    with pytest.raises(DuplicateAccountError) as exc:
        sessions.register("a@b.fr", "other", "Alice bis", "")
    assert exc.value.kind is ErrorKind.DUPLICATE_ACCOUNT
    assert exc.value.message == "Cet email est déjà utilisé"


def test_accounts_created_in_the_same_millisecond_get_distinct_ids(sessions):
    first, _ = sessions.register("a@b.fr", "pw", "A", "")
    second, _ = sessions.register("c@d.fr", "pw", "C", "")
    assert first.id != second.id


def test_login_wrong_password_fails(sessions):
    sessions.register("a@b.fr", "pw", "Alice", "")
    with pytest.raises(InvalidCredentialsError) as exc:
        sessions.login("a@b.fr", "PW")
    assert exc.value.kind is ErrorKind.INVALID_CREDENTIALS


def test_login_unknown_email_fails(sessions):
    with pytest.raises(InvalidCredentialsError):
        sessions.login("nobody@b.fr", "pw")


def test_login_returns_session_without_password_and_new_token(sessions):
    registered, first_token = sessions.register("a@b.fr", "pw", "Alice", "")
    sessions.logout()

    session, token = sessions.login("a@b.fr", "pw")

    assert session == registered
    assert "password" not in session.model_dump()
    assert token != first_token
    assert sessions.current_token() == token


def test_logout_clears_session_and_token(sessions, store):
    sessions.register("a@b.fr", "pw", "Alice", "")
    sessions.logout()
    assert sessions.current_session() is None
    assert store.get_item(SESSION_KEY) is None
    assert store.get_item(TOKEN_KEY) is None
    # no error when nobody is signed in
    sessions.logout()


def test_current_session_after_register(sessions):
    session, _ = sessions.register("a@b.fr", "pw", "Alice", "")
    assert sessions.current_session() == session


def test_malformed_session_is_discarded(sessions, store):
    store.set_item(SESSION_KEY, {"email": "a@b.fr"})
    store.set_item(TOKEN_KEY, "token")

    assert sessions.current_session() is None
    assert store.get_item(SESSION_KEY) is None
    assert store.get_item(TOKEN_KEY) is None


def test_session_without_token_is_not_current(sessions, store):
    sessions.register("a@b.fr", "pw", "Alice", "")
    store.remove_item(TOKEN_KEY)
    assert sessions.current_session() is None


def test_only_one_session_is_active(sessions):
    sessions.register("a@b.fr", "pw", "Alice", "")
    bob, _ = sessions.register("c@d.fr", "pw", "Bob", "")
    assert sessions.current_session() == bob
