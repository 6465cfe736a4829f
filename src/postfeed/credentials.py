from __future__ import annotations

import logging
import os
import secrets
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generator, Optional

import bcrypt

from .errors import PersistenceError
from .models import UserRecord

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


@dataclass(frozen=True)
class _Cols:
    table: str = "users"
    id: str = "id"
    username: str = "username"
    password: str = "password"


_COLS = _Cols()


# PUBLIC_INTERFACE
def hash_password(password: str) -> str:
    """Return a salted bcrypt hash of ``password``."""
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt()).decode("utf-8")


# PUBLIC_INTERFACE
def check_password(password: str, encoded: str) -> bool:
    """Compare ``password`` against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(_encode(password), encoded.encode("utf-8"))
    except ValueError:
        # Not a bcrypt hash
        return False


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class CredentialStore:
    """
    SQLite store of username/password-hash pairs.

    Rows are created by register() and read by verify(); they are never
    updated or deleted. Each call opens its own connection.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        # Hashed once so that unknown usernames cost as much as wrong passwords
        self._dummy_hash = hash_password(secrets.token_hex(8))

    @property
    def db_path(self) -> str:
        return self._db_path

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        try:
            conn = sqlite3.connect(self._db_path)
        except sqlite3.Error as exc:
            raise PersistenceError(f"cannot open credential store at {self._db_path}: {exc}") from exc
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    # PUBLIC_INTERFACE
    def ensure_schema(self) -> bool:
        """
        Create the users table if it does not exist.

        Failures are logged and reported as False; later auth calls will then
        fail against the missing table and return False as well.
        """
        try:
            os.makedirs(os.path.dirname(self._db_path) or ".", exist_ok=True)
            with self._conn() as conn:
                conn.execute(
                    f"""
                    CREATE TABLE IF NOT EXISTS {_COLS.table} (
                        {_COLS.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                        {_COLS.username} TEXT UNIQUE,
                        {_COLS.password} TEXT
                    )
                    """
                )
        except (OSError, sqlite3.Error, PersistenceError) as exc:
            logger.error("DB init error: %s", exc)
            return False
        logger.info("Credential store initialized at %s", self._db_path)
        return True

    def _row_to_record(self, row: sqlite3.Row) -> UserRecord:
        return {
            "id": int(row[_COLS.id]),
            "username": str(row[_COLS.username]),
            "password": str(row[_COLS.password]),
        }

    # PUBLIC_INTERFACE
    def get(self, username: str) -> Optional[UserRecord]:
        """Return the record for ``username`` or None."""
        with self._conn() as conn:
            row = conn.execute(
                f"SELECT * FROM {_COLS.table} WHERE {_COLS.username} = ?", (username,)
            ).fetchone()
            return self._row_to_record(row) if row else None

    # PUBLIC_INTERFACE
    def register(self, username: str, password: str) -> bool:
        """
        Insert a new user. True iff a row was inserted; False on any error,
        including an already taken username.
        """
        encoded = hash_password(password)
        try:
            with self._conn() as conn:
                cur = conn.execute(
                    f"INSERT INTO {_COLS.table} ({_COLS.username}, {_COLS.password}) VALUES (?, ?)",
                    (username, encoded),
                )
                return cur.rowcount > 0
        except sqlite3.IntegrityError:
            logger.info("Registration rejected for %r: username taken", username)
            return False
        except (sqlite3.Error, PersistenceError) as exc:
            logger.error("Registration error: %s", exc)
            return False

    # PUBLIC_INTERFACE
    def verify(self, username: str, password: str) -> bool:
        """True iff ``username`` exists and ``password`` matches its stored hash."""
        try:
            record = self.get(username)
        except (sqlite3.Error, PersistenceError) as exc:
            logger.error("Login error: %s", exc)
            return False
        if record is None:
            check_password(password, self._dummy_hash)
            return False
        return check_password(password, record["password"])
