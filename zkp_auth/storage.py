"""
storage.py
-----------
Registries for the authentication service:
- Registered users (user_id -> public values y1, y2)
- Pending login sessions (auth_id -> user_id, challenge, commitment, expiration)

Two interchangeable backends share one interface:
- MemoryStorage: process-local dictionaries, one lock per registry
- SQLiteStorage: the same tables persisted to a SQLite file

pop_session is an atomic get-and-remove: of any number of concurrent calls
for one auth_id, at most one receives the session.
"""

import logging
import sqlite3
import threading
import time
from typing import NamedTuple, Optional

from zkp_auth import config
from zkp_auth.exceptions import TooManySessions
from zkp_auth.protocol import Commitment, PublicValues

logger = logging.getLogger(__name__)


class PendingSession(NamedTuple):
    user_id: str
    challenge: int
    commitment: Commitment
    expires_at: float


class MemoryStorage:
    def __init__(self, max_sessions: int = config.MAX_SESSIONS,
                 max_sessions_per_user: int = config.MAX_SESSIONS_PER_USER):
        self.max_sessions = max_sessions
        self.max_sessions_per_user = max_sessions_per_user
        self._users = {}
        self._users_lock = threading.Lock()
        self._sessions = {}
        self._sessions_lock = threading.Lock()

    def store_user(self, user_id: str, public_values: PublicValues):
        with self._users_lock:
            self._users[user_id] = public_values

    def get_user(self, user_id: str) -> Optional[PublicValues]:
        with self._users_lock:
            return self._users.get(user_id)

    def _drop_expired(self, now: float) -> int:
        # caller holds _sessions_lock
        expired = [k for k, s in self._sessions.items() if now > s.expires_at]
        for auth_id in expired:
            del self._sessions[auth_id]
        return len(expired)

    def store_session(self, auth_id: str, session: PendingSession, now: Optional[float] = None):
        """
        Raises TooManySessions when either limit is reached after expired
        sessions are dropped. Live pending sessions are never displaced.
        """
        now = time.time() if now is None else now
        with self._sessions_lock:
            if len(self._sessions) >= self.max_sessions:
                self._drop_expired(now)
            if len(self._sessions) >= self.max_sessions:
                logger.warning("Pending session limit reached, refusing new login")
                raise TooManySessions("Too many pending logins, try again later")
            owned = sum(1 for s in self._sessions.values()
                        if s.user_id == session.user_id and now <= s.expires_at)
            if owned >= self.max_sessions_per_user:
                logger.warning("Pending session limit reached for user %r", session.user_id)
                raise TooManySessions("Too many pending logins for this user, try again later")
            self._sessions[auth_id] = session

    def pop_session(self, auth_id: str, now: Optional[float] = None) -> Optional[PendingSession]:
        with self._sessions_lock:
            session = self._sessions.pop(auth_id, None)
        if session is None:
            return None
        if (time.time() if now is None else now) > session.expires_at:
            return None
        return session

    def sweep_expired(self, now: Optional[float] = None) -> int:
        now = time.time() if now is None else now
        with self._sessions_lock:
            return self._drop_expired(now)

    def pending_count(self) -> int:
        with self._sessions_lock:
            return len(self._sessions)


class SQLiteStorage:
    """
    SQLite-backed registries. Integers are stored as hex text because they
    exceed SQLite's 64-bit INTEGER range.
    """

    def __init__(self, db_path: str = config.DB_PATH,
                 max_sessions_per_user: int = config.MAX_SESSIONS_PER_USER):
        self.db_path = db_path
        self.max_sessions_per_user = max_sessions_per_user
        self.init_db()

    def _get_conn(self):
        # Autocommit mode; transactions are opened explicitly where needed.
        return sqlite3.connect(self.db_path, timeout=10, isolation_level=None)

    def init_db(self):
        conn = self._get_conn()
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    user_id TEXT PRIMARY KEY,
                    y1 TEXT NOT NULL,
                    y2 TEXT NOT NULL
                );
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS sessions (
                    auth_id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    challenge TEXT NOT NULL,
                    r1 TEXT NOT NULL,
                    r2 TEXT NOT NULL,
                    expires_at REAL NOT NULL
                );
            """)
        finally:
            conn.close()

    def store_user(self, user_id: str, public_values: PublicValues):
        conn = self._get_conn()
        try:
            conn.execute(
                "INSERT OR REPLACE INTO users (user_id, y1, y2) VALUES (?, ?, ?);",
                (user_id, format(public_values.y1, "x"), format(public_values.y2, "x"))
            )
        finally:
            conn.close()

    def get_user(self, user_id: str) -> Optional[PublicValues]:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT y1, y2 FROM users WHERE user_id=?;", (user_id,)).fetchone()
        finally:
            conn.close()
        if row is None:
            return None
        return PublicValues(int(row[0], 16), int(row[1], 16))

    def store_session(self, auth_id: str, session: PendingSession, now: Optional[float] = None):
        now = time.time() if now is None else now
        conn = self._get_conn()
        try:
            conn.execute("BEGIN IMMEDIATE;")
            try:
                owned = conn.execute(
                    "SELECT COUNT(*) FROM sessions WHERE user_id=? AND expires_at >= ?;",
                    (session.user_id, now)
                ).fetchone()[0]
                if owned >= self.max_sessions_per_user:
                    raise TooManySessions("Too many pending logins for this user, try again later")
                conn.execute(
                    "INSERT INTO sessions (auth_id, user_id, challenge, r1, r2, expires_at) "
                    "VALUES (?, ?, ?, ?, ?, ?);",
                    (auth_id, session.user_id, format(session.challenge, "x"),
                     format(session.commitment.r1, "x"), format(session.commitment.r2, "x"),
                     session.expires_at)
                )
                conn.execute("COMMIT;")
            except (sqlite3.Error, TooManySessions):
                conn.execute("ROLLBACK;")
                raise
        finally:
            conn.close()

    def pop_session(self, auth_id: str, now: Optional[float] = None) -> Optional[PendingSession]:
        conn = self._get_conn()
        try:
            # BEGIN IMMEDIATE takes the write lock up front, so a concurrent
            # pop of the same auth_id waits and then finds the row gone.
            conn.execute("BEGIN IMMEDIATE;")
            try:
                row = conn.execute(
                    "SELECT user_id, challenge, r1, r2, expires_at FROM sessions WHERE auth_id=?;",
                    (auth_id,)
                ).fetchone()
                if row is not None:
                    conn.execute("DELETE FROM sessions WHERE auth_id=?;", (auth_id,))
                conn.execute("COMMIT;")
            except sqlite3.Error:
                conn.execute("ROLLBACK;")
                raise
        finally:
            conn.close()

        if row is None:
            return None
        user_id, challenge, r1, r2, expires_at = row
        if (time.time() if now is None else now) > expires_at:
            return None
        return PendingSession(user_id, int(challenge, 16), Commitment(int(r1, 16), int(r2, 16)), expires_at)

    def sweep_expired(self, now: Optional[float] = None) -> int:
        now = time.time() if now is None else now
        conn = self._get_conn()
        try:
            cur = conn.execute("DELETE FROM sessions WHERE expires_at < ?;", (now,))
            return cur.rowcount
        finally:
            conn.close()

    def pending_count(self) -> int:
        conn = self._get_conn()
        try:
            return conn.execute("SELECT COUNT(*) FROM sessions;").fetchone()[0]
        finally:
            conn.close()


def make_storage(backend: str = config.STORAGE_BACKEND, db_path: str = config.DB_PATH):
    if backend == "memory":
        return MemoryStorage()
    if backend == "sqlite":
        return SQLiteStorage(db_path)
    raise ValueError(f"Unknown storage backend: {backend!r}")
