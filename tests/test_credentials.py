import sqlite3

import pytest

from postfeed.credentials import CredentialStore, check_password, hash_password
from postfeed.session import SessionManager


@pytest.fixture
def store(tmp_path):
    s = CredentialStore(str(tmp_path / "nested" / "auth.db"))
    assert s.ensure_schema() is True
    return s


@pytest.fixture
def sessions(store):
    return SessionManager(store)


class TestPasswordHashing:
    def test_hash_is_salted(self):
        first = hash_password("pw1")
        second = hash_password("pw1")
        assert first != second
        assert first.startswith("$2b$")
        assert "pw1" not in first

    def test_check_password(self):
        encoded = hash_password("correct horse")
        assert check_password("correct horse", encoded) is True
        assert check_password("wrong horse", encoded) is False

    def test_malformed_hash_never_matches(self):
        assert check_password("pw", "plaintext-password") is False
        assert check_password("pw", "md5$1$00$00") is False

    def test_long_passwords_are_accepted(self):
        long_password = "p" * 100
        encoded = hash_password(long_password)
        assert check_password(long_password, encoded) is True
        assert check_password("p" * 50, encoded) is False


class TestCredentialStore:
    def test_ensure_schema_is_idempotent(self, store):
        assert store.ensure_schema() is True
        assert store.register("alice", "pw1") is True
        assert store.ensure_schema() is True
        assert store.get("alice") is not None

    def test_register_stores_a_hash(self, store):
        assert store.register("alice", "pw1") is True
        record = store.get("alice")
        assert record["username"] == "alice"
        assert record["id"] >= 1
        assert record["password"] != "pw1"
        with sqlite3.connect(store.db_path) as conn:
            raw = conn.execute("SELECT password FROM users WHERE username = 'alice'").fetchone()[0]
        assert raw != "pw1"

    def test_duplicate_username_is_rejected(self, store):
        assert store.register("alice", "pw1") is True
        assert store.register("alice", "pw2") is False
        assert store.verify("alice", "pw1") is True
        assert store.verify("alice", "pw2") is False

    def test_verify_unknown_user(self, store):
        assert store.verify("nobody", "pw") is False

    def test_rows_survive_a_new_store_instance(self, store):
        store.register("alice", "pw1")
        reopened = CredentialStore(store.db_path)
        reopened.ensure_schema()
        assert reopened.verify("alice", "pw1") is True

    def test_schema_failure_is_logged_not_raised(self, tmp_path, caplog):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("x")
        broken = CredentialStore(str(blocker / "auth.db"))

        assert broken.ensure_schema() is False
        assert "DB init error" in caplog.text
        # Later calls degrade to False instead of raising
        assert broken.register("alice", "pw1") is False
        assert broken.verify("alice", "pw1") is False


class TestSessionManager:
    def test_starts_anonymous(self, sessions):
        assert sessions.is_authenticated is False
        assert sessions.session.username is None

    def test_register_then_login(self, sessions):
        assert sessions.register("alice", "pw1") is True
        assert sessions.register("alice", "pw2") is False
        assert sessions.is_authenticated is False

        assert sessions.login("alice", "pw1") is True
        assert sessions.is_authenticated is True
        assert sessions.session.username == "alice"
        assert sessions.session.authenticated_at is not None

    def test_wrong_password_leaves_session_unchanged(self, sessions):
        sessions.register("alice", "pw1")
        assert sessions.login("alice", "wrong") is False
        assert sessions.is_authenticated is False

        sessions.login("alice", "pw1")
        before = sessions.session
        assert sessions.login("alice", "wrong") is False
        assert sessions.session is before

    def test_logout_is_idempotent(self, sessions):
        sessions.register("alice", "pw1")
        sessions.login("alice", "pw1")

        sessions.logout()
        assert sessions.is_authenticated is False
        sessions.logout()
        assert sessions.is_authenticated is False
        # Accounts are untouched by logout
        assert sessions.login("alice", "pw1") is True
