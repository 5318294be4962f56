"""
Volatile session registry.

Maps opaque session tokens to usernames. State lives only in process
memory: restarting the process logs everyone out, and tokens never expire
on their own. The map grows until tokens are revoked.
"""

import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from loguru import logger

from talentledger.security import generate_session_token


class ReadWriteLock:
    """
    Many concurrent readers or one writer.

    A waiting writer blocks new readers.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class SessionRegistry:
    """
    Thread-safe token -> username store.

    Usage:
        sessions = SessionRegistry()
        token = sessions.issue("alice")
        sessions.resolve(token)   # "alice"
        sessions.revoke(token)
        sessions.resolve(token)   # None
    """

    def __init__(self):
        self._sessions: dict[str, str] = {}
        self._lock = ReadWriteLock()

    def issue(self, username: str) -> str:
        """
        Start a session for ``username`` and return its token.

        Tokens are 256 random bits; collisions are not checked for.
        """
        token = generate_session_token()
        with self._lock.write():
            self._sessions[token] = username
        logger.debug(f"Issued session for {username}")
        return token

    def resolve(self, token: Optional[str]) -> Optional[str]:
        """Username for an active token, else None."""
        if not token:
            return None
        with self._lock.read():
            return self._sessions.get(token)

    def revoke(self, token: Optional[str]) -> None:
        """End a session. Unknown tokens are ignored."""
        if not token:
            return
        with self._lock.write():
            username = self._sessions.pop(token, None)
        if username is not None:
            logger.debug(f"Revoked session for {username}")

    def revoke_user(self, username: str) -> int:
        """
        End every session mapped to ``username``.

        Returns:
            Number of sessions dropped
        """
        with self._lock.write():
            tokens = [t for t, name in self._sessions.items() if name == username]
            for token in tokens:
                del self._sessions[token]
        if tokens:
            logger.debug(f"Revoked {len(tokens)} session(s) for {username}")
        return len(tokens)

    def active_count(self) -> int:
        with self._lock.read():
            return len(self._sessions)
