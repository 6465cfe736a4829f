from __future__ import annotations

import logging
from datetime import datetime, timezone
from threading import RLock

from .credentials import CredentialStore
from .models import Session

logger = logging.getLogger(__name__)

ANONYMOUS = Session()


# PUBLIC_INTERFACE
class SessionManager:
    """
    Owns the current Session and mediates every auth action.

    One instance per application; hand it to whatever needs the login state
    instead of reading a global flag. Sessions are not persisted.
    """

    def __init__(self, store: CredentialStore) -> None:
        self._store = store
        self._lock = RLock()
        self._session: Session = ANONYMOUS

    @property
    def session(self) -> Session:
        with self._lock:
            return self._session

    @property
    def is_authenticated(self) -> bool:
        return self.session.is_authenticated

    # PUBLIC_INTERFACE
    def register(self, username: str, password: str) -> bool:
        """Create an account. Does not log the user in."""
        return self._store.register(username, password)

    # PUBLIC_INTERFACE
    def login(self, username: str, password: str) -> bool:
        """
        Verify the credentials; on success the session becomes authenticated.
        A failed attempt leaves the current session untouched.
        """
        if not self._store.verify(username, password):
            logger.info("Login failed for %r", username)
            return False
        with self._lock:
            self._session = Session(username=username, authenticated_at=datetime.now(timezone.utc))
        logger.info("User %r logged in", username)
        return True

    # PUBLIC_INTERFACE
    def logout(self) -> None:
        """Return to the anonymous session. Safe to call repeatedly."""
        with self._lock:
            self._session = ANONYMOUS
